"""Modelo SolicitacaoOrcamento: pedido de orçamento enviado pelo site público.

Dois tipos: compra de artigos pirotécnicos (com kit escolhido) e contratação
da equipe para um show. O campo ``enviado_email`` marca a solicitação como já
processada pela equipe; não há exclusão obrigatória.
"""
from . import db
from datetime import datetime

TIPOS_SOLICITACAO = ('artigos_pirotecnicos', 'contratar_equipe')


class SolicitacaoOrcamento(db.Model):
    __tablename__ = 'solicitacoes_orcamento'
    id = db.Column(db.Integer, primary_key=True)
    tipo_solicitacao = db.Column(db.String(30), nullable=False)  # artigos_pirotecnicos | contratar_equipe
    nome_completo = db.Column(db.String(100), nullable=False)
    whatsapp = db.Column(db.String(20), nullable=False)  # Somente dígitos, com código do país
    email = db.Column(db.String(150), nullable=True)
    kit_selecionado = db.Column(db.String(100), nullable=True)  # Apenas para artigos pirotécnicos
    tipo_evento = db.Column(db.String(100), nullable=True)  # Apenas para contratar equipe
    localizacao_evento = db.Column(db.String(200), nullable=True)
    data_evento = db.Column(db.Date, nullable=True)
    observacoes = db.Column(db.Text, nullable=True)
    enviado_email = db.Column(db.Boolean, nullable=False, default=False)  # Processada pela equipe
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.CheckConstraint(
            "tipo_solicitacao IN ('artigos_pirotecnicos', 'contratar_equipe')",
            name='ck_solicitacoes_tipo',
        ),
    )

    def __repr__(self):
        return f'<Solicitacao {self.id} {self.tipo_solicitacao} processada={self.enviado_email}>'
