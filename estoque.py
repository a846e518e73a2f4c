"""Movimentações de estoque.

O fluxo é sempre em duas fases: ``planejar_*`` lê as quantidades atuais e
valida todos os itens sem alterar nada; ``aplicar_movimentos`` grava as novas
quantidades e o histórico. Quem chama decide quando fazer o commit, de modo que
uma falha em qualquer item desfaz o conjunto inteiro.
"""
import logging
from collections import OrderedDict
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError

from erros import ErroNegocio, EstoqueInsuficienteError, RegistroNaoEncontradoError
from models import db, Produto, HistoricoEstoque
from models.historico_estoque import ENTRADA, SAIDA, AJUSTE

logger = logging.getLogger(__name__)


@dataclass
class MovimentoEstoque:
    produto: Produto
    tipo: str
    quantidade_anterior: int
    quantidade_movimentada: int
    quantidade_atual: int
    motivo: str


def _quantidades_por_produto(itens):
    """Soma as quantidades de itens que repetem o mesmo produto, mantendo a ordem."""
    totais = OrderedDict()
    for item in itens:
        totais[item.produto_id] = totais.get(item.produto_id, 0) + item.quantidade
    return totais


def carregar_produtos(ids, bloquear=True):
    """Carrega os produtos por id; com ``bloquear`` usa SELECT ... FOR UPDATE
    (ignorado por bancos que não suportam, como o SQLite)."""
    if not ids:
        return {}
    query = Produto.query.filter(Produto.id.in_(list(ids)))
    if bloquear:
        query = query.with_for_update()
    produtos = {p.id: p for p in query.all()}
    for produto_id in ids:
        if produto_id not in produtos:
            raise RegistroNaoEncontradoError('Produto', produto_id)
    return produtos


def planejar_saida(itens, motivo):
    """Valida a retirada de todos os itens; levanta EstoqueInsuficienteError no
    primeiro produto sem saldo, antes de qualquer alteração."""
    totais = _quantidades_por_produto(itens)
    produtos = carregar_produtos(totais.keys())
    movimentos = []
    for produto_id, quantidade in totais.items():
        produto = produtos[produto_id]
        disponivel = produto.quantidade_disponivel or 0
        nova_quantidade = disponivel - quantidade
        if nova_quantidade < 0:
            raise EstoqueInsuficienteError(produto.nome_produto, disponivel, quantidade)
        movimentos.append(MovimentoEstoque(produto, SAIDA, disponivel, quantidade, nova_quantidade, motivo))
    return movimentos


def planejar_entrada(itens, motivo):
    totais = _quantidades_por_produto(itens)
    produtos = carregar_produtos(totais.keys())
    movimentos = []
    for produto_id, quantidade in totais.items():
        produto = produtos[produto_id]
        disponivel = produto.quantidade_disponivel or 0
        movimentos.append(
            MovimentoEstoque(produto, ENTRADA, disponivel, quantidade, disponivel + quantidade, motivo)
        )
    return movimentos


def aplicar_movimentos(movimentos, usuario_id=None):
    """Grava as quantidades e uma linha de histórico por produto (sem commit)."""
    for mov in movimentos:
        mov.produto.quantidade_disponivel = mov.quantidade_atual
        db.session.add(HistoricoEstoque(
            produto_id=mov.produto.id,
            tipo_movimentacao=mov.tipo,
            quantidade_anterior=mov.quantidade_anterior,
            quantidade_movimentada=mov.quantidade_movimentada,
            quantidade_atual=mov.quantidade_atual,
            motivo=mov.motivo,
            usuario_id=usuario_id,
        ))
        logger.info(
            'Estoque %s: %s %s -> %s (%s)',
            mov.produto.codigo, mov.tipo, mov.quantidade_anterior, mov.quantidade_atual, mov.motivo,
        )
    db.session.flush()


def registrar_estoque_inicial(produto, usuario_id=None):
    """Histórico de entrada para o saldo com que um produto foi cadastrado (sem commit)."""
    if produto.quantidade_disponivel and produto.quantidade_disponivel > 0:
        db.session.add(HistoricoEstoque(
            produto_id=produto.id,
            tipo_movimentacao=ENTRADA,
            quantidade_anterior=0,
            quantidade_movimentada=produto.quantidade_disponivel,
            quantidade_atual=produto.quantidade_disponivel,
            motivo='Estoque inicial',
            usuario_id=usuario_id,
        ))


def planejar_ajuste(produto, nova_quantidade, motivo):
    """Movimento de ajuste para levar o produto à nova quantidade, ou None se já estiver nela."""
    if nova_quantidade is None or nova_quantidade < 0:
        raise ErroNegocio('A quantidade em estoque não pode ser negativa.')
    anterior = produto.quantidade_disponivel or 0
    if anterior == nova_quantidade:
        return None
    return MovimentoEstoque(
        produto, AJUSTE, anterior, abs(nova_quantidade - anterior), nova_quantidade,
        motivo or 'Ajuste manual de estoque',
    )


def ajustar_estoque(produto_id, nova_quantidade, motivo, usuario_id=None):
    """Ajuste manual (inventário) com registro no histórico."""
    try:
        produto = carregar_produtos([produto_id])[produto_id]
        mov = planejar_ajuste(produto, nova_quantidade, motivo)
        if mov is None:
            return None
        aplicar_movimentos([mov], usuario_id)
        db.session.commit()
        return mov
    except (SQLAlchemyError, ErroNegocio):
        db.session.rollback()
        raise


def atualizar_produto(produto_id, campos, nova_quantidade, motivo, usuario_id=None):
    """Grava os campos do produto e, se a quantidade mudou, o ajuste de estoque
    com histórico, tudo no mesmo commit. Devolve (produto, movimento)."""
    try:
        produto = carregar_produtos([produto_id])[produto_id]
        mov = planejar_ajuste(produto, nova_quantidade, motivo)
        for campo, valor in campos.items():
            setattr(produto, campo, valor)
        if mov is not None:
            aplicar_movimentos([mov], usuario_id)
        db.session.commit()
    except (SQLAlchemyError, ErroNegocio):
        db.session.rollback()
        raise
    logger.info('Produto %s atualizado', produto.codigo)
    return produto, mov


def historico_produto(produto_id, limite=None):
    query = HistoricoEstoque.query.filter_by(produto_id=produto_id).order_by(
        HistoricoEstoque.created_at.desc(), HistoricoEstoque.id.desc()
    )
    if limite:
        query = query.limit(limite)
    return query.all()


def produtos_estoque_baixo(limite):
    return (
        Produto.query.filter(Produto.ativo.is_(True), Produto.quantidade_disponivel < limite)
        .order_by(Produto.quantidade_disponivel.asc())
        .all()
    )
