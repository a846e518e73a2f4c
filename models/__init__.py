# Inicialização do SQLAlchemy e importação dos modelos do sistema
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()  # Instância global do banco de dados

# Importação dos modelos para registro no SQLAlchemy
from .usuario import Usuario
from .produto import Produto
from .solicitacao import SolicitacaoOrcamento
from .orcamento import Orcamento, OrcamentoProduto
from .evento import Evento
from .historico_estoque import HistoricoEstoque
