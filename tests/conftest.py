import os
import sys
from datetime import date, timedelta

# Banco em memória e CSRF desligado antes de importar a aplicação
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["WTF_CSRF_ENABLED"] = "0"

# Ensure project root in path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest

import app as app_module
from models import db, Produto, Usuario

SENHA = "segredo123"


@pytest.fixture
def app():
    flask_app = app_module.app
    flask_app.config.update(TESTING=True, WTF_CSRF_ENABLED=False)
    with flask_app.app_context():
        db.create_all()
        app_module.catalogo_publico.invalidar()
        yield flask_app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def criar_produto(app):
    contador = {"n": 0}

    def _criar(nome, quantidade=10, valor_venda=10.0, duracao=None, categoria="tortas", codigo=None, ativo=True):
        contador["n"] += 1
        produto = Produto(
            codigo=codigo or f"TST{contador['n']:03d}",
            nome_produto=nome,
            categoria=categoria,
            valor_compra=round(valor_venda / 2, 2),
            valor_venda=valor_venda,
            quantidade_disponivel=quantidade,
            duracao_segundos=duracao,
            ativo=ativo,
        )
        db.session.add(produto)
        db.session.commit()
        return produto

    return _criar


@pytest.fixture
def dados_orcamento():
    return {
        "tipo": "show_pirotecnico",
        "nome_contratante": "Maria Souza",
        "telefone": "61999990000",
        "evento_nome": "Casamento Maria",
        "evento_data": date.today() + timedelta(days=10),
        "evento_local": "Luziânia",
        "modo_pagamento": "pix",
        "margem_lucro": 0,
    }


def criar_usuario(email, role="admin"):
    usuario = Usuario(nome=email.split("@")[0], email=email, role=role)
    usuario.set_password(SENHA)
    db.session.add(usuario)
    db.session.commit()
    return usuario


def login(client, email):
    return client.post("/admin/login", data={"email": email, "senha": SENHA})


@pytest.fixture
def admin_client(client):
    criar_usuario("admin@m5max.com.br")
    login(client, "admin@m5max.com.br")
    return client
