# Formulários do estoque: cadastro/edição de produto e ajuste manual de quantidade
from flask_wtf import FlaskForm
from wtforms import StringField, DecimalField, IntegerField, SelectField, BooleanField, SubmitField, TextAreaField
from wtforms.validators import DataRequired, InputRequired, NumberRange, Optional, Length

from config_orcamento import CATEGORIAS_PRODUTO

class ProdutoForm(FlaskForm):
    codigo = StringField('Código', validators=[Optional(), Length(max=20)])  # Em branco gera o próximo da categoria
    nome_produto = StringField('Nome do Produto', validators=[DataRequired(message='Nome do produto é obrigatório'), Length(max=150)])
    categoria = SelectField('Categoria', choices=CATEGORIAS_PRODUTO, validators=[DataRequired(message='Categoria é obrigatória')])
    fabricante = StringField('Fabricante', validators=[Optional(), Length(max=100)])
    efeito = StringField('Efeito', validators=[Optional(), Length(max=200)])
    tubos = StringField('Tubos', validators=[Optional(), Length(max=50)])
    duracao_segundos = IntegerField('Duração (segundos)', validators=[Optional(), NumberRange(min=0, message='Duração deve ser maior ou igual a 0')])
    valor_compra = DecimalField('Valor de Compra', places=2, validators=[InputRequired(), NumberRange(min=0)])
    valor_venda = DecimalField('Valor de Venda', places=2, validators=[InputRequired(), NumberRange(min=0)])
    # InputRequired aceita 0 (DataRequired recusaria produto sem estoque)
    quantidade_disponivel = IntegerField('Quantidade em Estoque', default=0, validators=[InputRequired(), NumberRange(min=0, message='Quantidade deve ser maior ou igual a 0')])
    ativo = BooleanField('Ativo', default=True)
    submit = SubmitField('Salvar')


class AjusteEstoqueForm(FlaskForm):
    nova_quantidade = IntegerField('Nova Quantidade', validators=[InputRequired(), NumberRange(min=0, message='A quantidade não pode ser negativa')])
    motivo = TextAreaField('Motivo', validators=[Optional(), Length(max=255)], render_kw={"rows": 2, "placeholder": "Ex.: contagem de inventário"})
    submit = SubmitField('Ajustar')
