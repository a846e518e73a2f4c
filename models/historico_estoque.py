"""Modelo HistoricoEstoque: livro de movimentações de estoque (somente inclusão).

Cada linha guarda a quantidade anterior, a movimentada e a resultante, o tipo
('entrada', 'saida' ou 'ajuste') e o motivo em texto livre.
"""
from . import db
from datetime import datetime

ENTRADA = 'entrada'
SAIDA = 'saida'
AJUSTE = 'ajuste'
TIPOS_MOVIMENTACAO = (ENTRADA, SAIDA, AJUSTE)


class HistoricoEstoque(db.Model):
    __tablename__ = 'historico_estoque'
    id = db.Column(db.Integer, primary_key=True)
    produto_id = db.Column(db.Integer, db.ForeignKey('produtos.id'), nullable=True)
    tipo_movimentacao = db.Column(db.String(10), nullable=False)
    quantidade_anterior = db.Column(db.Integer, nullable=False)
    quantidade_movimentada = db.Column(db.Integer, nullable=False)
    quantidade_atual = db.Column(db.Integer, nullable=False)
    motivo = db.Column(db.String(255), nullable=True)
    usuario_id = db.Column(db.Integer, db.ForeignKey('usuarios.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    produto = db.relationship('Produto', backref='historico')
    usuario = db.relationship('Usuario', backref='movimentacoes_estoque')

    def __repr__(self):
        return (
            f'<HistoricoEstoque produto={self.produto_id} {self.tipo_movimentacao} '
            f'{self.quantidade_anterior}->{self.quantidade_atual}>'
        )
