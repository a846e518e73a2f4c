"""Orçamentos: montagem (itens e valor total) e ciclo de vida do status.

A troca de status é a única operação que mexe no estoque. Tudo acontece numa
única transação: os itens e as quantidades dos produtos são lidos, todos os
itens são validados e só então as quantidades, o histórico, o evento derivado
e o novo status são gravados. Qualquer erro desfaz o conjunto.
"""
import logging
from dataclasses import dataclass, field

from sqlalchemy.exc import SQLAlchemyError

import estoque
import eventos
from config_orcamento import calcular_valor_item, calcular_valor_total
from erros import ErroNegocio, RegistroNaoEncontradoError, TransicaoInvalidaError
from models import db, Orcamento, OrcamentoProduto, Produto
from models.orcamento import STATUS_ORCAMENTO

logger = logging.getLogger(__name__)

# Status em que os produtos do orçamento já saíram do estoque
STATUS_COM_RESERVA = frozenset({'aprovado', 'confirmado', 'realizado'})
# Destinos que retiram os produtos do estoque
STATUS_APROVACAO = frozenset({'aprovado', 'confirmado'})

TRANSICOES = {
    'pendente': {'processado', 'aprovado', 'confirmado', 'cancelado'},
    'processado': {'aprovado', 'confirmado', 'cancelado'},
    'aprovado': {'confirmado', 'realizado', 'cancelado'},
    'confirmado': {'realizado', 'cancelado'},
    'cancelado': {'pendente', 'aprovado', 'confirmado'},
    'realizado': set(),
}

MENSAGENS_STATUS = {
    'pendente': 'Orçamento marcado como pendente.',
    'processado': 'Orçamento marcado como processado.',
    'aprovado': 'Orçamento aprovado com sucesso!',
    'confirmado': 'Orçamento confirmado com sucesso!',
    'realizado': 'Orçamento marcado como realizado.',
    'cancelado': 'Orçamento cancelado com sucesso.',
}


@dataclass
class ItemOrcamento:
    produto_id: int
    quantidade: int
    valor_unitario: float = None  # None usa o preço de venda atual do produto


@dataclass
class ResultadoTransicao:
    orcamento: Orcamento
    status_anterior: str
    movimentos: list = field(default_factory=list)

    @property
    def estoque_alterado(self):
        return bool(self.movimentos)

    @property
    def mensagem(self):
        texto = MENSAGENS_STATUS.get(self.orcamento.status, 'Status do orçamento atualizado.')
        if self.estoque_alterado:
            if self.movimentos[0].tipo == 'saida':
                texto += ' Estoque atualizado.'
            else:
                texto += ' Produtos devolvidos ao estoque.'
        return texto


def transicao_permitida(status_atual, novo_status):
    if status_atual == novo_status:
        return True
    return novo_status in TRANSICOES.get(status_atual, set())


def movimento_de_estoque(status_atual, novo_status):
    """'saida', 'entrada' ou None para a transição informada."""
    if status_atual not in STATUS_COM_RESERVA and novo_status in STATUS_APROVACAO:
        return 'saida'
    if status_atual in STATUS_APROVACAO and novo_status == 'cancelado':
        return 'entrada'
    return None


def obter_orcamento(orcamento_id, bloquear=False):
    query = Orcamento.query.filter_by(id=orcamento_id)
    if bloquear:
        query = query.with_for_update()
    orcamento = query.first()
    if orcamento is None:
        raise RegistroNaoEncontradoError('Orçamento', orcamento_id)
    return orcamento


def alterar_status(orcamento_id, novo_status, usuario_id=None):
    """Altera o status do orçamento aplicando a movimentação de estoque.

    - (pendente|processado|cancelado) -> (aprovado|confirmado): retira a
      quantidade de cada item; se algum produto não tiver saldo, nada é gravado
    - (aprovado|confirmado) -> cancelado: devolve a quantidade de cada item
    - demais transições: apenas o status
    """
    if novo_status not in STATUS_ORCAMENTO:
        raise ErroNegocio(f'Status de orçamento inválido: {novo_status}')
    try:
        orcamento = obter_orcamento(orcamento_id, bloquear=True)
        status_anterior = orcamento.status
        if not transicao_permitida(status_anterior, novo_status):
            raise TransicaoInvalidaError(status_anterior, novo_status)

        movimentos = []
        tipo = movimento_de_estoque(status_anterior, novo_status)
        if tipo == 'saida' and orcamento.itens:
            movimentos = estoque.planejar_saida(orcamento.itens, f'Orçamento aprovado - {orcamento.evento_nome}')
        elif tipo == 'entrada' and orcamento.itens:
            movimentos = estoque.planejar_entrada(orcamento.itens, f'Orçamento cancelado - {orcamento.evento_nome}')

        estoque.aplicar_movimentos(movimentos, usuario_id)
        orcamento.status = novo_status
        if status_anterior != novo_status:
            eventos.sincronizar_evento(orcamento)
        db.session.commit()
    except (SQLAlchemyError, ErroNegocio):
        db.session.rollback()
        raise

    logger.info(
        'Orçamento %s: %s -> %s (%d produto(s) movimentado(s))',
        orcamento_id, status_anterior, novo_status, len(movimentos),
    )
    return ResultadoTransicao(orcamento, status_anterior, movimentos)


def _montar_itens(orcamento, itens):
    """Cria os OrcamentoProduto a partir de ItemOrcamento (ou dicts equivalentes)."""
    novos = []
    for item in itens:
        if isinstance(item, dict):
            item = ItemOrcamento(**item)
        if not item.quantidade or item.quantidade <= 0:
            raise ErroNegocio('A quantidade de cada produto deve ser maior que zero.')
        produto = db.session.get(Produto, item.produto_id)
        if produto is None:
            raise RegistroNaoEncontradoError('Produto', item.produto_id)
        valor_unitario = produto.valor_venda if item.valor_unitario is None else item.valor_unitario
        novo = OrcamentoProduto(
            produto=produto,
            quantidade=item.quantidade,
            valor_unitario=valor_unitario,
            valor_total=calcular_valor_item(item.quantidade, valor_unitario),
        )
        # Pela coleção do orçamento (o backref sozinho não leva o item para a sessão)
        orcamento.itens.append(novo)
        db.session.add(novo)
        novos.append(novo)
    return novos


def criar_orcamento(dados, itens, usuario_id=None, exigir_itens=True):
    """Cria o orçamento com seus itens; o valor total é calculado aqui."""
    if exigir_itens and not itens:
        raise ErroNegocio('Adicione pelo menos um produto ao orçamento.')
    try:
        orcamento = Orcamento(**dados)
        orcamento.created_by = usuario_id
        orcamento.status = orcamento.status or 'pendente'
        if orcamento.status in STATUS_COM_RESERVA:
            raise ErroNegocio('Crie o orçamento como pendente e aprove-o depois para movimentar o estoque.')
        db.session.add(orcamento)
        _montar_itens(orcamento, itens)
        orcamento.valor_total = calcular_valor_total(orcamento.itens, orcamento.margem_lucro)
        db.session.commit()
    except (SQLAlchemyError, ErroNegocio):
        db.session.rollback()
        raise
    logger.info('Orçamento %s criado (%s) valor_total=%.2f', orcamento.id, orcamento.evento_nome, orcamento.valor_total)
    return orcamento


def atualizar_orcamento(orcamento_id, dados, itens=None):
    """Atualiza os dados do orçamento e, se ``itens`` vier, substitui os itens.

    Itens não podem ser trocados enquanto o orçamento estiver com os produtos
    retirados do estoque (aprovado, confirmado ou realizado).
    """
    try:
        orcamento = obter_orcamento(orcamento_id)
        if 'status' in dados:
            raise ErroNegocio('Use a alteração de status para mudar o status do orçamento.')
        for campo, valor in dados.items():
            setattr(orcamento, campo, valor)
        if itens is not None:
            if orcamento.status in STATUS_COM_RESERVA:
                raise ErroNegocio(
                    'Os produtos deste orçamento já saíram do estoque. Cancele o orçamento antes de alterar os itens.'
                )
            orcamento.itens.clear()
            db.session.flush()
            _montar_itens(orcamento, itens)
        orcamento.valor_total = calcular_valor_total(orcamento.itens, orcamento.margem_lucro)
        db.session.commit()
    except (SQLAlchemyError, ErroNegocio):
        db.session.rollback()
        raise
    return orcamento


def excluir_orcamento(orcamento_id):
    try:
        orcamento = obter_orcamento(orcamento_id)
        if orcamento.status in STATUS_COM_RESERVA and orcamento.status != 'realizado':
            raise ErroNegocio('Cancele o orçamento antes de excluí-lo para devolver os produtos ao estoque.')
        db.session.delete(orcamento)
        db.session.commit()
    except (SQLAlchemyError, ErroNegocio):
        db.session.rollback()
        raise
    logger.info('Orçamento %s excluído', orcamento_id)


def buscar_orcamentos(status=None, tipo=None, data_inicio=None, data_fim=None, busca=None, pagina=1, limite=20):
    """Listagem paginada; devolve (orcamentos, total)."""
    query = Orcamento.query
    if status:
        query = query.filter(Orcamento.status == status)
    if tipo:
        query = query.filter(Orcamento.tipo == tipo)
    if data_inicio:
        query = query.filter(Orcamento.created_at >= data_inicio)
    if data_fim:
        query = query.filter(Orcamento.created_at <= data_fim)
    if busca:
        termo = f'%{busca}%'
        query = query.filter(
            Orcamento.nome_contratante.ilike(termo)
            | Orcamento.evento_nome.ilike(termo)
            | Orcamento.cpf.ilike(termo)
        )
    total = query.count()
    orcamentos = (
        query.order_by(Orcamento.created_at.desc(), Orcamento.id.desc())
        .offset((pagina - 1) * limite)
        .limit(limite)
        .all()
    )
    return orcamentos, total
