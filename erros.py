"""Exceções de regra de negócio.

Erros de banco continuam sendo SQLAlchemyError; estas classes cobrem apenas
violações de regra, que as rotas exibem como aviso ao usuário.
"""


class ErroNegocio(Exception):
    """Violação de regra de negócio (mensagem pronta para o usuário)."""


class EstoqueInsuficienteError(ErroNegocio):
    def __init__(self, produto, disponivel, necessario):
        self.produto = produto
        self.disponivel = disponivel
        self.necessario = necessario
        super().__init__(
            f'Estoque insuficiente para {produto}. '
            f'Disponível: {disponivel}, Necessário: {necessario}'
        )


class TransicaoInvalidaError(ErroNegocio):
    def __init__(self, status_atual, novo_status):
        self.status_atual = status_atual
        self.novo_status = novo_status
        super().__init__(f'Não é possível alterar o status de "{status_atual}" para "{novo_status}".')


class RegistroNaoEncontradoError(ErroNegocio):
    def __init__(self, entidade, registro_id):
        self.entidade = entidade
        self.registro_id = registro_id
        super().__init__(f'{entidade} #{registro_id} não encontrado.')


class ConsultaInvalidaError(ErroNegocio):
    """Coluna desconhecida em filtro/ordenação de uma Consulta."""
