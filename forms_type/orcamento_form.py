# Formulários de orçamento: dados do contratante/evento, itens e troca de status
from flask_wtf import FlaskForm
from wtforms import Form, StringField, DateField, DecimalField, IntegerField, SelectField, FieldList, FormField, SubmitField
from wtforms.validators import DataRequired, NumberRange, Optional, Length

from config_orcamento import TIPOS_ORCAMENTO, MODOS_PAGAMENTO
from models.orcamento import STATUS_ORCAMENTO

LINHAS_ITENS = 8  # Linhas de produto exibidas no formulário


class ItemOrcamentoForm(Form):
    """Linha de item; produto 0 significa linha em branco (ignorada)."""
    produto_id = SelectField('Produto', coerce=int, default=0)
    quantidade = IntegerField('Quantidade', validators=[Optional(), NumberRange(min=1, message='Quantidade deve ser maior que zero')])
    valor_unitario = DecimalField('Valor Unitário', places=2, validators=[Optional(), NumberRange(min=0)])  # Em branco usa o preço de venda


class OrcamentoForm(FlaskForm):
    tipo = SelectField('Tipo', choices=TIPOS_ORCAMENTO, validators=[DataRequired()])
    nome_contratante = StringField('Contratante', validators=[DataRequired(message='Nome do contratante é obrigatório'), Length(max=150)])
    telefone = StringField('Telefone', validators=[Optional(), Length(max=20)])
    cpf = StringField('CPF', validators=[Optional(), Length(max=20)])
    evento_nome = StringField('Nome do Evento', validators=[DataRequired(message='Nome do evento é obrigatório'), Length(max=200)])
    evento_data = DateField('Data do Evento', validators=[DataRequired(message='Data do evento é obrigatória')])
    evento_local = StringField('Local do Evento', validators=[DataRequired(message='Local do evento é obrigatório'), Length(max=200)])
    modo_pagamento = SelectField('Pagamento', choices=MODOS_PAGAMENTO, validators=[DataRequired()])
    margem_lucro = DecimalField('Margem de Lucro (%)', places=2, default=0, validators=[Optional(), NumberRange(min=0, message='Margem de lucro deve ser maior ou igual a 0')])
    itens = FieldList(FormField(ItemOrcamentoForm), min_entries=LINHAS_ITENS)
    submit = SubmitField('Salvar Orçamento')

    def definir_produtos(self, produtos):
        opcoes = [(0, '— selecione —')] + [
            (p.id, f'{p.codigo} - {p.nome_produto} (disp. {p.quantidade_disponivel})') for p in produtos
        ]
        for entrada in self.itens:
            entrada.produto_id.choices = opcoes

    def itens_preenchidos(self):
        """Dicts (produto_id, quantidade, valor_unitario) das linhas com produto."""
        itens = []
        for entrada in self.itens:
            if not entrada.produto_id.data:
                continue
            valor = entrada.valor_unitario.data
            itens.append({
                'produto_id': entrada.produto_id.data,
                'quantidade': entrada.quantidade.data or 0,
                'valor_unitario': float(valor) if valor is not None else None,
            })
        return itens

    def dados_orcamento(self):
        return {
            'tipo': self.tipo.data,
            'nome_contratante': self.nome_contratante.data.strip(),
            'telefone': self.telefone.data or None,
            'cpf': self.cpf.data or None,
            'evento_nome': self.evento_nome.data.strip(),
            'evento_data': self.evento_data.data,
            'evento_local': self.evento_local.data.strip(),
            'modo_pagamento': self.modo_pagamento.data,
            'margem_lucro': float(self.margem_lucro.data or 0),
        }


class StatusOrcamentoForm(FlaskForm):
    status = SelectField('Status', choices=[(s, s.capitalize()) for s in STATUS_ORCAMENTO], validators=[DataRequired()])
    submit = SubmitField('Alterar Status')
