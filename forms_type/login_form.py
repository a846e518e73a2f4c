# Formulário de login do painel administrativo
from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, SubmitField
from wtforms.validators import DataRequired, Email, Length

class LoginForm(FlaskForm):
    email = StringField('E-mail', validators=[DataRequired(), Email(message='E-mail inválido')])  # E-mail do usuário
    senha = PasswordField('Senha', validators=[DataRequired(), Length(min=6, message='Senha deve ter pelo menos 6 caracteres')])  # Senha do usuário
    submit = SubmitField('Entrar')  # Botão de login
