"""Eventos (shows agendados) derivados dos orçamentos."""
import logging
from datetime import date, datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError

from erros import ErroNegocio, RegistroNaoEncontradoError
from models import db, Evento, Orcamento
from models.evento import STATUS_EVENTO

logger = logging.getLogger(__name__)

# Coluna de data preenchida quando o evento entra em cada status
_CARIMBOS = {
    'confirmado': 'confirmado_em',
    'realizado': 'realizado_em',
    'cancelado': 'cancelado_em',
}


def aplicar_status_evento(evento, status, quando=None):
    """Altera o status e preenche a data correspondente (sem commit)."""
    if status not in STATUS_EVENTO:
        raise ErroNegocio(f'Status de evento inválido: {status}')
    evento.status = status
    coluna = _CARIMBOS.get(status)
    if coluna:
        setattr(evento, coluna, quando or datetime.utcnow())
    return evento


# Status do orçamento -> status do evento derivado
_STATUS_EVENTO_POR_ORCAMENTO = {
    'aprovado': 'confirmado',
    'confirmado': 'confirmado',
    'realizado': 'realizado',
    'cancelado': 'cancelado',
}


def sincronizar_evento(orcamento):
    """Cria ou atualiza o evento de um orçamento conforme o status dele (sem commit).

    Orçamento aprovado/confirmado gera o evento confirmado; realizado e
    cancelado são repassados ao evento existente. Pendente/processado não
    mexem no evento.
    """
    status = _STATUS_EVENTO_POR_ORCAMENTO.get(orcamento.status)
    if status is None:
        return orcamento.evento
    evento = orcamento.evento
    if evento is None:
        if status == 'cancelado':
            return None
        evento = Evento(orcamento=orcamento)
        db.session.add(evento)
    if evento.status != status:
        aplicar_status_evento(evento, status)
    return evento


def _obter(evento_id):
    evento = db.session.get(Evento, evento_id)
    if evento is None:
        raise RegistroNaoEncontradoError('Evento', evento_id)
    return evento


def _salvar(evento, descricao):
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Erro ao %s do evento %s', descricao, evento.id)
        raise
    return evento


def criar_evento(orcamento_id, observacoes=None):
    orcamento = db.session.get(Orcamento, orcamento_id)
    if orcamento is None:
        raise RegistroNaoEncontradoError('Orçamento', orcamento_id)
    if orcamento.evento is not None:
        raise ErroNegocio(f'O orçamento #{orcamento_id} já possui evento.')
    evento = Evento(orcamento=orcamento, status='pendente', observacoes=observacoes)
    db.session.add(evento)
    return _salvar(evento, 'criar')


def atualizar_status_evento(evento_id, status):
    evento = _obter(evento_id)
    aplicar_status_evento(evento, status)
    logger.info('Evento %s -> %s', evento.id, status)
    return _salvar(evento, 'atualizar o status')


def salvar_observacoes(evento_id, observacoes):
    evento = _obter(evento_id)
    evento.observacoes = observacoes or None
    return _salvar(evento, 'salvar as observações')


def atualizar_contrato_url(evento_id, url):
    evento = _obter(evento_id)
    evento.pdf_url = url or None
    return _salvar(evento, 'atualizar o contrato')


def remover_evento(evento_id):
    evento = _obter(evento_id)
    try:
        db.session.delete(evento)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    logger.info('Evento %s removido', evento_id)


def buscar_eventos(status=None, busca=None, data_inicio=None, data_fim=None):
    """Eventos com os dados do orçamento, ordenados pela data do show."""
    query = Evento.query.join(Orcamento)
    if status:
        query = query.filter(Evento.status == status)
    if data_inicio:
        query = query.filter(Orcamento.evento_data >= data_inicio)
    if data_fim:
        query = query.filter(Orcamento.evento_data <= data_fim)
    if busca:
        termo = f'%{busca}%'
        query = query.filter(
            Orcamento.evento_nome.ilike(termo)
            | Orcamento.nome_contratante.ilike(termo)
            | Orcamento.evento_local.ilike(termo)
        )
    return query.order_by(Orcamento.evento_data.asc(), Evento.id.asc()).all()


def eventos_proximos(dias=30, hoje=None):
    hoje = hoje or date.today()
    return buscar_eventos(data_inicio=hoje, data_fim=hoje + timedelta(days=dias))
