"""Solicitações de orçamento recebidas pelo site."""
import logging
from datetime import date

from sqlalchemy.exc import SQLAlchemyError

from erros import ErroNegocio, RegistroNaoEncontradoError
from models import db, Orcamento, SolicitacaoOrcamento
from models.solicitacao import TIPOS_SOLICITACAO

logger = logging.getLogger(__name__)


def normalizar_whatsapp(numero, codigo_pais='55'):
    """Mantém só os dígitos; números nacionais (DDD + número, até 11 dígitos)
    recebem o código do país."""
    digitos = ''.join(c for c in (numero or '') if c.isdigit())
    if digitos and codigo_pais and len(digitos) <= 11:
        digitos = f'{codigo_pais}{digitos}'
    return digitos


def _dados_orcamento(solicitacao):
    """Campos de um orçamento pendente pré-preenchido com a solicitação."""
    if solicitacao.tipo_solicitacao == 'contratar_equipe':
        tipo = 'show_pirotecnico'
        nome_evento = f'{solicitacao.tipo_evento or "Show Pirotécnico"} - {solicitacao.nome_completo}'
    else:
        tipo = 'venda_artigos'
        nome_evento = f'{solicitacao.kit_selecionado or "Artigos Pirotécnicos"} - {solicitacao.nome_completo}'
    return {
        'tipo': tipo,
        'nome_contratante': solicitacao.nome_completo,
        'telefone': solicitacao.whatsapp,
        'cpf': '',
        'evento_nome': nome_evento,
        'evento_data': solicitacao.data_evento or date.today(),
        'evento_local': solicitacao.localizacao_evento or 'A definir',
        'modo_pagamento': 'dinheiro',
        'valor_total': 0.0,
        'margem_lucro': 0.0,
        'status': 'pendente',
        'solicitacao_id': solicitacao.id,
    }


def registrar_solicitacao(dados):
    """Grava a solicitação enviada pelo site.

    Pedidos de contratação da equipe já geram um orçamento pendente (sem
    itens) para a equipe completar no painel. Devolve (solicitacao, orcamento).
    """
    if dados.get('tipo_solicitacao') not in TIPOS_SOLICITACAO:
        raise ErroNegocio('Tipo de solicitação inválido.')
    try:
        solicitacao = SolicitacaoOrcamento(**dados)
        solicitacao.enviado_email = False
        db.session.add(solicitacao)
        db.session.flush()
        orcamento = None
        if solicitacao.tipo_solicitacao == 'contratar_equipe':
            orcamento = Orcamento(**_dados_orcamento(solicitacao))
            db.session.add(orcamento)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Erro ao registrar solicitação de %s', dados.get('nome_completo'))
        raise
    logger.info('Solicitação %s recebida (%s)', solicitacao.id, solicitacao.tipo_solicitacao)
    return solicitacao, orcamento


def _obter(solicitacao_id):
    solicitacao = db.session.get(SolicitacaoOrcamento, solicitacao_id)
    if solicitacao is None:
        raise RegistroNaoEncontradoError('Solicitação', solicitacao_id)
    return solicitacao


def marcar_processada(solicitacao_id):
    solicitacao = _obter(solicitacao_id)
    try:
        solicitacao.enviado_email = True
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    return solicitacao


def converter_em_orcamento(solicitacao_id, usuario_id=None):
    """Gera o orçamento pendente da solicitação (ou devolve o já existente)
    e marca a solicitação como processada."""
    solicitacao = _obter(solicitacao_id)
    try:
        orcamento = Orcamento.query.filter_by(solicitacao_id=solicitacao.id).first()
        if orcamento is None:
            orcamento = Orcamento(**_dados_orcamento(solicitacao))
            orcamento.created_by = usuario_id
            db.session.add(orcamento)
        solicitacao.enviado_email = True
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    logger.info('Solicitação %s convertida no orçamento %s', solicitacao.id, orcamento.id)
    return orcamento


def buscar_solicitacoes(tipo_solicitacao=None, processadas=None, pagina=1, limite=20):
    query = SolicitacaoOrcamento.query
    if tipo_solicitacao:
        query = query.filter(SolicitacaoOrcamento.tipo_solicitacao == tipo_solicitacao)
    if processadas is not None:
        query = query.filter(SolicitacaoOrcamento.enviado_email.is_(processadas))
    total = query.count()
    itens = (
        query.order_by(SolicitacaoOrcamento.created_at.desc(), SolicitacaoOrcamento.id.desc())
        .offset((pagina - 1) * limite)
        .limit(limite)
        .all()
    )
    return itens, total


def excluir_solicitacao(solicitacao_id):
    """Remove a solicitação; orçamentos gerados a partir dela são mantidos sem o vínculo."""
    solicitacao = _obter(solicitacao_id)
    try:
        # Pelo ORM (e não UPDATE em massa) para que a alteração chegue ao tempo real
        for orcamento in Orcamento.query.filter_by(solicitacao_id=solicitacao.id).all():
            orcamento.solicitacao_id = None
        db.session.delete(solicitacao)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    logger.info('Solicitação %s excluída', solicitacao_id)
