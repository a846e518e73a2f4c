"""Modelos Orcamento e OrcamentoProduto.

O status do orçamento é gravado com todos os valores exibidos no painel
(pendente, processado, aprovado, confirmado, realizado, cancelado); a regra de
transição e o controle de estoque ficam em ``orcamentos.py``.
"""
from . import db
from datetime import datetime

STATUS_ORCAMENTO = ('pendente', 'processado', 'aprovado', 'confirmado', 'realizado', 'cancelado')


class Orcamento(db.Model):
    __tablename__ = 'orcamentos'
    id = db.Column(db.Integer, primary_key=True)
    tipo = db.Column(db.String(30), nullable=False, default='show_pirotecnico')  # show_pirotecnico | venda_artigos
    nome_contratante = db.Column(db.String(150), nullable=False)
    telefone = db.Column(db.String(20), nullable=True)
    cpf = db.Column(db.String(20), nullable=True)
    evento_nome = db.Column(db.String(200), nullable=False)
    evento_data = db.Column(db.Date, nullable=False)
    evento_local = db.Column(db.String(200), nullable=False)
    modo_pagamento = db.Column(db.String(20), nullable=False, default='dinheiro')
    margem_lucro = db.Column(db.Float, nullable=False, default=0.0)  # Percentual aplicado sobre o subtotal
    valor_total = db.Column(db.Float, nullable=False, default=0.0)  # Subtotal dos itens + margem
    status = db.Column(db.String(20), nullable=False, default='pendente')
    pdf_url = db.Column(db.String(255), nullable=True)
    created_by = db.Column(db.Integer, db.ForeignKey('usuarios.id'), nullable=True)
    solicitacao_id = db.Column(db.Integer, db.ForeignKey('solicitacoes_orcamento.id'), nullable=True)  # Solicitação de origem
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    itens = db.relationship(
        'OrcamentoProduto', backref='orcamento', cascade='all, delete-orphan', order_by='OrcamentoProduto.id'
    )
    evento = db.relationship('Evento', backref='orcamento', uselist=False, cascade='all, delete-orphan')
    solicitacao = db.relationship('SolicitacaoOrcamento', backref='orcamentos')
    criador = db.relationship('Usuario', backref='orcamentos')

    __table_args__ = (
        db.CheckConstraint(
            "status IN ('pendente', 'processado', 'aprovado', 'confirmado', 'realizado', 'cancelado')",
            name='ck_orcamentos_status',
        ),
    )

    def __repr__(self):
        return f'<Orcamento {self.id} {self.evento_nome} status={self.status}>'


class OrcamentoProduto(db.Model):
    __tablename__ = 'orcamentos_produtos'
    id = db.Column(db.Integer, primary_key=True)
    orcamento_id = db.Column(db.Integer, db.ForeignKey('orcamentos.id'), nullable=False)
    produto_id = db.Column(db.Integer, db.ForeignKey('produtos.id'), nullable=False)
    quantidade = db.Column(db.Integer, nullable=False)
    valor_unitario = db.Column(db.Float, nullable=False)  # Preço de venda no momento em que o item foi adicionado
    valor_total = db.Column(db.Float, nullable=False)  # quantidade x valor_unitario
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    produto = db.relationship('Produto', backref='itens_orcamento')

    __table_args__ = (
        db.CheckConstraint('quantidade > 0', name='ck_orcamentos_produtos_quantidade_positiva'),
    )
