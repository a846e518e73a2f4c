# Modelo Evento: show agendado a partir de um orçamento confirmado (1-1 com o orçamento)
from . import db
from datetime import datetime

STATUS_EVENTO = ('pendente', 'confirmado', 'realizado', 'cancelado')


class Evento(db.Model):
    __tablename__ = 'eventos'
    id = db.Column(db.Integer, primary_key=True)
    orcamento_id = db.Column(db.Integer, db.ForeignKey('orcamentos.id'), unique=True, nullable=False)
    status = db.Column(db.String(20), nullable=False, default='pendente')
    confirmado_em = db.Column(db.DateTime, nullable=True)
    realizado_em = db.Column(db.DateTime, nullable=True)
    cancelado_em = db.Column(db.DateTime, nullable=True)
    observacoes = db.Column(db.Text, nullable=True)
    pdf_url = db.Column(db.String(255), nullable=True)  # URL do contrato assinado
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.CheckConstraint(
            "status IN ('pendente', 'confirmado', 'realizado', 'cancelado')", name='ck_eventos_status'
        ),
    )

    def __repr__(self):
        return f'<Evento {self.id} orcamento={self.orcamento_id} status={self.status}>'
