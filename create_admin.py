"""
Script simples para criar (ou redefinir a senha de) um usuário do painel
Uso: python create_admin.py email senha [nome] [--moderador]
"""

import os
import sys

# Adiciona o diretório atual ao path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))


def criar_usuario(email, senha, nome='Administrador', role='admin'):
    """Cria o usuário ou, se o e-mail já existir, redefine senha e papel. Retorna (usuario, criado)."""
    from app import db
    from models.usuario import Usuario, ROLES

    if role not in ROLES:
        raise ValueError(f'Papel inválido: {role}')
    if len(senha) < 6:
        raise ValueError('A senha deve ter pelo menos 6 caracteres')
    email = email.strip().lower()
    usuario = Usuario.query.filter_by(email=email).first()
    criado = usuario is None
    if criado:
        usuario = Usuario(nome=nome, email=email)
        db.session.add(usuario)
    usuario.role = role
    usuario.ativo = True
    usuario.set_password(senha)
    db.session.commit()
    return usuario, criado


def main(argv=None):
    argv = list(sys.argv[1:] if argv is None else argv)
    role = 'admin'
    if '--moderador' in argv:
        argv.remove('--moderador')
        role = 'moderador'
    if len(argv) < 2:
        print(__doc__)
        return 1

    from app import app

    email, senha = argv[0], argv[1]
    nome = argv[2] if len(argv) > 2 else 'Administrador'
    with app.app_context():
        try:
            usuario, criado = criar_usuario(email, senha, nome, role)
        except ValueError as e:
            print(f"❌ {e}")
            return 1
        acao = 'criado' if criado else 'atualizado'
        print(f"✅ Usuário {acao} com sucesso!")
        print(f"   📧 Email: {usuario.email}")
        print(f"   👤 Nome: {usuario.nome}")
        print(f"   🔐 Role: {usuario.role}")
        if role == 'admin':
            print("\n⚠️  IMPORTANTE: Altere a senha após o primeiro login!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
