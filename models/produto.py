# Modelo Produto: artigo pirotécnico do estoque
from . import db
from datetime import datetime


class Produto(db.Model):
    __tablename__ = 'produtos'  # Nome da tabela no banco de dados
    id = db.Column(db.Integer, primary_key=True)  # Identificador único do produto
    codigo = db.Column(db.String(20), unique=True, nullable=False)  # Prefixo da categoria + sequência (ex.: TOR001)
    nome_produto = db.Column(db.String(150), nullable=False)  # Nome do produto
    categoria = db.Column(db.String(50), nullable=False)  # Categoria (tortas, granadas, ...)
    fabricante = db.Column(db.String(100), nullable=True)  # Fabricante
    efeito = db.Column(db.String(200), nullable=True)  # Descrição do efeito
    tubos = db.Column(db.String(50), nullable=True)  # Quantidade/tipo de tubos
    duracao_segundos = db.Column(db.Integer, nullable=True)  # Duração do efeito em segundos
    valor_compra = db.Column(db.Float, nullable=False)  # Preço de compra
    valor_venda = db.Column(db.Float, nullable=False)  # Preço de venda
    quantidade_disponivel = db.Column(db.Integer, nullable=False, default=0)  # Quantidade em estoque
    ativo = db.Column(db.Boolean, nullable=False, default=True)  # Aparece no catálogo e nos orçamentos
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.CheckConstraint('quantidade_disponivel >= 0', name='ck_produtos_quantidade_nao_negativa'),
    )

    def __repr__(self):
        return f'<Produto {self.codigo} {self.nome_produto}>'  # Representação legível para debug
