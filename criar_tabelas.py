"""
Cria as tabelas do banco e o administrador inicial
Uso: python criar_tabelas.py
"""
from sqlalchemy import inspect

from app import app, db, seed_admin

TABELAS = (
    'usuarios', 'produtos', 'solicitacoes_orcamento', 'orcamentos',
    'orcamentos_produtos', 'eventos', 'historico_estoque',
)


def tabelas_faltando():
    existentes = set(inspect(db.engine).get_table_names())
    return [t for t in TABELAS if t not in existentes]


def criar_tabelas():
    with app.app_context():
        db.create_all()
        faltando = tabelas_faltando()
        if faltando:
            print(f"❌ Erro: tabelas não criadas: {', '.join(faltando)}")
            return False
        print("✅ Tabelas criadas/confirmadas no banco de dados")
        admin = seed_admin()
        if admin is not None:
            print(f"✅ Administrador inicial criado: {admin.email}")
        return True


if __name__ == '__main__':
    criar_tabelas()
