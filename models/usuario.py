# Modelo Usuario: usuário do painel administrativo (login, papel)
from . import db
from datetime import datetime
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

ROLES = ('admin', 'moderador')


class Usuario(UserMixin, db.Model):
    __tablename__ = 'usuarios'  # Nome da tabela no banco de dados
    id = db.Column(db.Integer, primary_key=True)  # Identificador único do usuário
    nome = db.Column(db.String(150), nullable=False)  # Nome completo do usuário
    email = db.Column(db.String(150), unique=True, nullable=False)  # E-mail (login)
    senha_hash = db.Column(db.String(256), nullable=False)  # Hash da senha do usuário
    role = db.Column(db.String(20), nullable=False, default='moderador')  # Papel: admin ou moderador
    ativo = db.Column(db.Boolean, nullable=False, default=True)  # Usuários inativos não fazem login
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def is_admin(self):
        return self.role == 'admin'

    @property
    def is_active(self):
        return bool(self.ativo)

    def set_password(self, senha):
        """Define a senha do usuário (armazenando o hash)"""
        self.senha_hash = generate_password_hash(senha)

    def check_password(self, senha):
        """Verifica se a senha informada confere com o hash armazenado"""
        return check_password_hash(self.senha_hash, senha)
