from .login_form import LoginForm
from .produto_form import ProdutoForm, AjusteEstoqueForm
from .orcamento_form import OrcamentoForm, StatusOrcamentoForm
from .solicitacao_form import SolicitacaoArtigosForm, SolicitacaoEquipeForm
from .evento_form import StatusEventoForm, ObservacoesEventoForm, ContratoEventoForm
