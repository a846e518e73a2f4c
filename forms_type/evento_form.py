# Formulários da agenda de eventos
from flask_wtf import FlaskForm
from wtforms import SelectField, TextAreaField, StringField, SubmitField
from wtforms.validators import DataRequired, Optional, URL, Length

from models.evento import STATUS_EVENTO

class StatusEventoForm(FlaskForm):
    status = SelectField('Status', choices=[(s, s.capitalize()) for s in STATUS_EVENTO], validators=[DataRequired()])
    submit = SubmitField('Alterar')


class ObservacoesEventoForm(FlaskForm):
    observacoes = TextAreaField('Observações', validators=[Optional()], render_kw={"rows": 3})
    submit = SubmitField('Salvar Observações')


class ContratoEventoForm(FlaskForm):
    pdf_url = StringField('URL do Contrato', validators=[Optional(), URL(message='URL inválida'), Length(max=255)])  # Contrato assinado hospedado fora do sistema
    submit = SubmitField('Salvar Contrato')
