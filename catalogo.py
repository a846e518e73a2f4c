"""Catálogo de produtos: filtros, ordenação por custo-benefício e geração de
código por categoria."""
import logging
from types import SimpleNamespace

from sqlalchemy.exc import SQLAlchemyError

from config_orcamento import PREFIXOS_CATEGORIA, PREFIXO_PADRAO
from erros import ErroNegocio
from models import db, Produto, OrcamentoProduto, HistoricoEstoque

logger = logging.getLogger(__name__)

ASC = 'asc'
DESC = 'desc'
NENHUMA = 'none'
DIRECOES = (ASC, DESC, NENHUMA)


def _validar_direcao(nome, valor):
    if valor not in DIRECOES:
        raise ValueError(f'Ordenação por {nome} inválida: {valor!r} (use asc, desc ou none)')


def tem_duracao(produto):
    return bool(produto.duracao_segundos) and produto.duracao_segundos > 0


def custo_por_segundo(produto):
    """Preço de venda dividido pela duração do efeito (None sem duração)."""
    if not tem_duracao(produto):
        return None
    return produto.valor_venda / produto.duracao_segundos


def ordenar_produtos(produtos, ordem_preco=NENHUMA, ordem_duracao=NENHUMA):
    """Ordena os produtos por preço e/ou duração.

    Com alguma ordenação ativa, produtos sem duração positiva ficam de fora.
    Com as duas ativas:
      - preço asc + duração desc: menor custo por segundo primeiro
      - preço desc + duração asc: maior custo por segundo primeiro
      - outras combinações: duração (na sua direção), empate pelo preço
    Sem ordenação, a ordem de entrada é mantida.
    """
    _validar_direcao('preço', ordem_preco)
    _validar_direcao('duração', ordem_duracao)

    preco_ativo = ordem_preco != NENHUMA
    duracao_ativa = ordem_duracao != NENHUMA
    if not preco_ativo and not duracao_ativa:
        return list(produtos)

    resultado = [p for p in produtos if tem_duracao(p)]

    if preco_ativo and duracao_ativa:
        if ordem_preco == ASC and ordem_duracao == DESC:
            resultado.sort(key=custo_por_segundo)
        elif ordem_preco == DESC and ordem_duracao == ASC:
            resultado.sort(key=custo_por_segundo, reverse=True)
        else:
            # sort é estável: ordena pelo critério de desempate e depois pelo principal
            resultado.sort(key=lambda p: p.valor_venda, reverse=ordem_preco == DESC)
            resultado.sort(key=lambda p: p.duracao_segundos, reverse=ordem_duracao == DESC)
    elif preco_ativo:
        resultado.sort(key=lambda p: p.valor_venda, reverse=ordem_preco == DESC)
    else:
        resultado.sort(key=lambda p: p.duracao_segundos, reverse=ordem_duracao == DESC)
    return resultado


def _contem(valor, termo):
    return bool(valor) and termo in valor.lower()


def filtrar_produtos(produtos, busca='', categoria='all', efeito='all',
                     ordem_preco=NENHUMA, ordem_duracao=NENHUMA, somente_ativos=False):
    """Aplica os filtros simples (texto, categoria, efeito, ativos) e depois a ordenação."""
    termo = (busca or '').strip().lower()
    categoria = (categoria or 'all').lower()
    efeito = (efeito or 'all').lower()

    filtrados = []
    for produto in produtos:
        if somente_ativos and not produto.ativo:
            continue
        if categoria != 'all' and (produto.categoria or '').lower() != categoria:
            continue
        if efeito != 'all' and (produto.efeito or '').lower() != efeito:
            continue
        if termo and not (
            _contem(produto.nome_produto, termo)
            or _contem(produto.codigo, termo)
            or _contem(produto.fabricante, termo)
        ):
            continue
        filtrados.append(produto)
    return ordenar_produtos(filtrados, ordem_preco, ordem_duracao)


def prefixo_categoria(categoria):
    return PREFIXOS_CATEGORIA.get(categoria, PREFIXO_PADRAO)


def proximo_codigo(prefixo, codigos_existentes):
    """Próximo código da sequência do prefixo, com três dígitos (TOR001, TOR002...)."""
    maior = 0
    for codigo in codigos_existentes:
        sufixo = codigo[len(prefixo):]
        if codigo.startswith(prefixo) and sufixo.isdigit():
            maior = max(maior, int(sufixo))
    return f'{prefixo}{maior + 1:03d}'


def gerar_codigo_produto(categoria):
    prefixo = prefixo_categoria(categoria)
    codigos = [c for (c,) in db.session.query(Produto.codigo).filter(Produto.codigo.like(f'{prefixo}%')).all()]
    return proximo_codigo(prefixo, codigos)


def produto_para_dict(produto):
    return {
        'id': produto.id,
        'codigo': produto.codigo,
        'nome_produto': produto.nome_produto,
        'categoria': produto.categoria,
        'fabricante': produto.fabricante,
        'efeito': produto.efeito,
        'tubos': produto.tubos,
        'duracao_segundos': produto.duracao_segundos,
        'valor_venda': float(produto.valor_venda or 0),
        'quantidade_disponivel': int(produto.quantidade_disponivel or 0),
        'ativo': bool(produto.ativo),
        'custo_por_segundo': custo_por_segundo(produto),
    }


def produto_resumo(produto):
    """Cópia do produto desligada da sessão, usada pelo cache do catálogo público."""
    return SimpleNamespace(**produto_para_dict(produto))


def excluir_produto(produto_id):
    """Exclui o produto. Produtos usados em orçamentos não podem ser excluídos
    (devem ser desativados); o histórico de estoque é mantido sem o vínculo."""
    produto = db.session.get(Produto, produto_id)
    if produto is None:
        raise ErroNegocio(f'Produto #{produto_id} não encontrado.')
    em_uso = OrcamentoProduto.query.filter_by(produto_id=produto_id).count()
    if em_uso:
        raise ErroNegocio(
            f'O produto {produto.nome_produto} está em {em_uso} item(ns) de orçamento. Desative-o em vez de excluir.'
        )
    try:
        for movimento in HistoricoEstoque.query.filter_by(produto_id=produto_id).all():
            movimento.produto_id = None
        db.session.delete(produto)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    logger.info('Produto %s (%s) excluído', produto.codigo, produto.nome_produto)
    return produto
