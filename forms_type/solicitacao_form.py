# Formulários públicos de solicitação de orçamento (artigos pirotécnicos e contratação da equipe)
from datetime import date

from flask_wtf import FlaskForm
from wtforms import StringField, DateField, SelectField, TextAreaField, SubmitField
from wtforms.validators import DataRequired, Email, Length, Optional, Regexp, ValidationError

from conteudo_site import opcoes_kits

WHATSAPP_INVALIDO = 'WhatsApp deve ter entre 9 a 11 dígitos'


class SolicitacaoBaseForm(FlaskForm):
    nome_completo = StringField('Nome Completo', validators=[DataRequired(), Length(min=2, max=100, message='Nome deve ter entre 2 e 100 caracteres')])
    codigo_pais = StringField('Código do País', default='55', validators=[DataRequired(), Regexp(r'^\d{1,3}$')])
    whatsapp = StringField('WhatsApp (DDD + número)', validators=[DataRequired(), Regexp(r'^\d{9,11}$', message=WHATSAPP_INVALIDO)])
    email = StringField('E-mail', validators=[Optional(), Email(message='E-mail inválido')])
    localizacao_evento = StringField('Local do Evento', validators=[DataRequired(message='Informe a localização do evento'), Length(max=200)])
    data_evento = DateField('Data do Evento', validators=[DataRequired(message='Informe a data do evento')])
    observacoes = TextAreaField('Observações', validators=[Optional(), Length(max=500, message='Observações muito longas (máx. 500 caracteres)')])
    submit = SubmitField('Solicitar Orçamento')

    def validate_data_evento(self, field):
        if field.data and field.data < date.today():
            raise ValidationError('A data do evento deve ser futura')


class SolicitacaoArtigosForm(SolicitacaoBaseForm):
    tipo_solicitacao = 'artigos_pirotecnicos'
    kit_selecionado = SelectField('Kit', choices=opcoes_kits(), validators=[DataRequired(message='Selecione um kit')])


class SolicitacaoEquipeForm(SolicitacaoBaseForm):
    tipo_solicitacao = 'contratar_equipe'
    tipo_evento = StringField('Tipo de Evento', validators=[DataRequired(message='Informe o tipo de evento'), Length(max=100)])
    orcamento_estimado = StringField('Orçamento Estimado', validators=[Optional(), Length(max=50)])
    duracao_evento = StringField('Duração do Show (minutos)', validators=[Optional(), Regexp(r'^\d+$', message='Deve conter apenas números')])
