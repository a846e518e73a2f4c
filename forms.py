# Formulários de filtro das listagens (enviados por GET, sem CSRF)
from flask_wtf import FlaskForm
from wtforms import StringField, SelectField, DateField
from wtforms.validators import Optional

# Importar formulários específicos de login, produtos, orçamentos, solicitações e eventos
from forms_type import (
    LoginForm, ProdutoForm, AjusteEstoqueForm, OrcamentoForm, StatusOrcamentoForm,
    SolicitacaoArtigosForm, SolicitacaoEquipeForm, StatusEventoForm, ObservacoesEventoForm, ContratoEventoForm,
)
from config_orcamento import CATEGORIAS_PRODUTO, TIPOS_ORCAMENTO
from models.orcamento import STATUS_ORCAMENTO
from models.evento import STATUS_EVENTO

ORDENS = [('none', 'Sem ordenação'), ('asc', 'Crescente'), ('desc', 'Decrescente')]


class FiltroForm(FlaskForm):
    """Base dos filtros: lê de request.args e não exige token CSRF."""
    class Meta:
        csrf = False


class FiltroCatalogoForm(FiltroForm):
    """Filtros do catálogo público e da tela de estoque"""
    busca = StringField('Buscar', validators=[Optional()])
    categoria = SelectField('Categoria', choices=[('all', 'Todas')] + CATEGORIAS_PRODUTO, default='all', validators=[Optional()])
    efeito = StringField('Efeito', default='all', validators=[Optional()])
    ordem_preco = SelectField('Preço', choices=ORDENS, default='none', validators=[Optional()])
    ordem_duracao = SelectField('Duração', choices=ORDENS, default='none', validators=[Optional()])


class FiltroOrcamentosForm(FiltroForm):
    status = SelectField('Status', choices=[('', 'Todos')] + [(s, s.capitalize()) for s in STATUS_ORCAMENTO], default='', validators=[Optional()])
    tipo = SelectField('Tipo', choices=[('', 'Todos')] + TIPOS_ORCAMENTO, default='', validators=[Optional()])
    data_inicio = DateField('De', validators=[Optional()])
    data_fim = DateField('Até', validators=[Optional()])
    busca = StringField('Buscar', validators=[Optional()])


class FiltroEventosForm(FiltroForm):
    status = SelectField('Status', choices=[('', 'Todos')] + [(s, s.capitalize()) for s in STATUS_EVENTO], default='', validators=[Optional()])
    data_inicio = DateField('De', validators=[Optional()])
    data_fim = DateField('Até', validators=[Optional()])
    busca = StringField('Buscar', validators=[Optional()])
