from datetime import date, timedelta

import pytest

import orcamentos
from app import seed_admin
from create_admin import criar_usuario as criar_pelo_script
from conftest import criar_usuario, login
from models import HistoricoEstoque, Orcamento, Produto, SolicitacaoOrcamento


def _data_futura(dias=20):
    return (date.today() + timedelta(days=dias)).isoformat()


def test_paginas_publicas(client):
    assert client.get("/").status_code == 200
    assert client.get("/produtos").status_code == 200
    assert client.get("/solicitar-orcamento").status_code == 200
    assert client.get("/solicitar-orcamento?tipo=contratar_equipe").status_code == 200


def test_catalogo_publico_ordenado_e_sem_inativos(client, criar_produto):
    criar_produto("Produto X", valor_venda=100, duracao=10)
    criar_produto("Produto Y", valor_venda=50, duracao=20)
    criar_produto("Produto Oculto", valor_venda=1, duracao=60, ativo=False)

    html = client.get("/produtos?ordem_preco=asc&ordem_duracao=desc").get_data(as_text=True)
    assert html.index("Produto Y") < html.index("Produto X")
    assert "Produto Oculto" not in html


def test_catalogo_publico_atualiza_depois_de_alteracao(client, criar_produto):
    criar_produto("Primeiro")
    assert "Primeiro" in client.get("/produtos").get_data(as_text=True)
    criar_produto("Segundo")
    assert "Segundo" in client.get("/produtos").get_data(as_text=True)


def test_solicitar_contratacao_da_equipe(client):
    resposta = client.post("/solicitar-orcamento?tipo=contratar_equipe", data={
        "nome_completo": "Maria Souza",
        "codigo_pais": "55",
        "whatsapp": "61982735575",
        "email": "maria@gmail.com",
        "tipo_evento": "Casamento",
        "localizacao_evento": "Luziânia",
        "data_evento": _data_futura(),
        "duracao_evento": "5",
    })
    assert resposta.status_code == 302

    solicitacao = SolicitacaoOrcamento.query.one()
    assert solicitacao.whatsapp == "5561982735575"
    assert solicitacao.tipo_solicitacao == "contratar_equipe"
    assert "Duração: 5 min" in solicitacao.observacoes
    assert Orcamento.query.one().status == "pendente"


def test_solicitacao_com_whatsapp_invalido(client):
    resposta = client.post("/solicitar-orcamento?tipo=artigos_pirotecnicos", data={
        "nome_completo": "Maria Souza",
        "codigo_pais": "55",
        "whatsapp": "1234",
        "kit_selecionado": "Kit Casamento",
        "localizacao_evento": "Luziânia",
        "data_evento": _data_futura(),
    })
    assert resposta.status_code == 200
    assert "WhatsApp deve ter entre 9 a 11 dígitos" in resposta.get_data(as_text=True)
    assert SolicitacaoOrcamento.query.count() == 0


def test_solicitacao_com_data_passada(client):
    resposta = client.post("/solicitar-orcamento?tipo=artigos_pirotecnicos", data={
        "nome_completo": "Maria Souza",
        "codigo_pais": "55",
        "whatsapp": "61982735575",
        "kit_selecionado": "Kit Casamento",
        "localizacao_evento": "Luziânia",
        "data_evento": (date.today() - timedelta(days=1)).isoformat(),
    })
    assert "A data do evento deve ser futura" in resposta.get_data(as_text=True)
    assert SolicitacaoOrcamento.query.count() == 0


def test_admin_exige_login(client):
    resposta = client.get("/admin")
    assert resposta.status_code == 302
    assert "/admin/login" in resposta.headers["Location"]


def test_moderador_nao_acessa_painel(client):
    criar_usuario("moderador@m5max.com.br", role="moderador")
    login(client, "moderador@m5max.com.br")
    resposta = client.get("/admin/estoque")
    assert resposta.status_code == 302
    assert "/admin/acesso-negado" in resposta.headers["Location"]
    assert client.get("/admin/api/tempo-real").status_code == 302


def test_login_com_senha_errada(client):
    criar_usuario("admin@m5max.com.br")
    resposta = client.post("/admin/login", data={"email": "admin@m5max.com.br", "senha": "errada123"})
    assert "E-mail ou senha incorretos." in resposta.get_data(as_text=True)
    assert client.get("/admin").status_code == 302


def test_telas_do_painel(admin_client, criar_produto, dados_orcamento):
    produto = criar_produto("Torta A", quantidade=2)
    orcamento = orcamentos.criar_orcamento(dados_orcamento, [{"produto_id": produto.id, "quantidade": 1}])
    for url in [
        "/admin",
        "/admin/estoque",
        "/admin/estoque?ordem_preco=asc&ordem_duracao=desc",
        "/admin/estoque/novo",
        f"/admin/estoque/{produto.id}/editar",
        f"/admin/estoque/{produto.id}/historico",
        "/admin/orcamentos",
        "/admin/orcamentos?status=pendente",
        "/admin/orcamentos/novo",
        f"/admin/orcamentos/{orcamento.id}",
        f"/admin/orcamentos/{orcamento.id}/editar",
        "/admin/solicitacoes",
        "/admin/eventos",
    ]:
        assert admin_client.get(url).status_code == 200, url


def test_cadastrar_produto_gera_codigo_e_historico(admin_client):
    resposta = admin_client.post("/admin/estoque/novo", data={
        "codigo": "",
        "nome_produto": "Torta 200 Tiros",
        "categoria": "tortas",
        "valor_compra": "50",
        "valor_venda": "120",
        "quantidade_disponivel": "6",
        "duracao_segundos": "90",
        "ativo": "y",
    })
    assert resposta.status_code == 302
    produto = Produto.query.filter_by(nome_produto="Torta 200 Tiros").one()
    assert produto.codigo == "TOR001"
    historico = HistoricoEstoque.query.filter_by(produto_id=produto.id).one()
    assert (historico.tipo_movimentacao, historico.quantidade_atual) == ("entrada", 6)

    assert admin_client.get("/admin/api/produtos/codigo?categoria=tortas").get_json()["codigo"] == "TOR002"


def test_criar_orcamento_pelo_formulario(admin_client, criar_produto):
    a = criar_produto("Torta A", valor_venda=10.0)
    b = criar_produto("Torta B", valor_venda=25.0)
    resposta = admin_client.post("/admin/orcamentos/novo", data={
        "tipo": "show_pirotecnico",
        "nome_contratante": "Maria",
        "evento_nome": "Casamento",
        "evento_data": _data_futura(),
        "evento_local": "Luziânia",
        "modo_pagamento": "pix",
        "margem_lucro": "0",
        "itens-0-produto_id": str(a.id),
        "itens-0-quantidade": "3",
        "itens-1-produto_id": str(b.id),
        "itens-1-quantidade": "2",
    })
    assert resposta.status_code == 302
    orcamento = Orcamento.query.one()
    assert orcamento.valor_total == 80.0
    assert orcamento.created_by is not None


def test_alterar_status_pela_tela(admin_client, criar_produto, dados_orcamento):
    produto = criar_produto("Torta A", quantidade=5)
    orcamento = orcamentos.criar_orcamento(dados_orcamento, [{"produto_id": produto.id, "quantidade": 2}])

    resposta = admin_client.post(f"/admin/orcamentos/{orcamento.id}/status", data={"status": "confirmado"})
    assert resposta.status_code == 302
    assert produto.quantidade_disponivel == 3
    assert orcamento.status == "confirmado"
    assert HistoricoEstoque.query.one().usuario_id is not None


def test_api_status_estoque_insuficiente(admin_client, criar_produto, dados_orcamento):
    produto = criar_produto("Produto X", quantidade=2)
    orcamento = orcamentos.criar_orcamento(dados_orcamento, [{"produto_id": produto.id, "quantidade": 5}])

    resposta = admin_client.post(f"/admin/api/orcamentos/{orcamento.id}/status", json={"status": "confirmado"})
    assert resposta.status_code == 409
    assert "Produto X" in resposta.get_json()["error"]
    assert produto.quantidade_disponivel == 2

    resposta = admin_client.post("/admin/api/orcamentos/999/status", json={"status": "confirmado"})
    assert resposta.status_code == 404


def test_api_status_confirma(admin_client, criar_produto, dados_orcamento):
    produto = criar_produto("Torta A", quantidade=5)
    orcamento = orcamentos.criar_orcamento(dados_orcamento, [{"produto_id": produto.id, "quantidade": 2}])

    dados = admin_client.post(f"/admin/api/orcamentos/{orcamento.id}/status", json={"status": "aprovado"}).get_json()
    assert dados["status"] == "aprovado"
    assert dados["estoque_alterado"] is True
    assert dados["movimentos"][0]["quantidade_atual"] == 3


def test_api_produtos_ordenados(admin_client, criar_produto):
    criar_produto("Produto X", valor_venda=100, duracao=10)
    criar_produto("Produto Y", valor_venda=50, duracao=20)
    criar_produto("Sem Duração", valor_venda=1)

    dados = admin_client.get("/admin/api/produtos?ordem_preco=asc&ordem_duracao=desc").get_json()
    assert [p["nome_produto"] for p in dados["produtos"]] == ["Produto Y", "Produto X"]
    assert admin_client.get("/admin/api/produtos?ordem_preco=subindo").status_code == 400


def test_api_tempo_real(admin_client, criar_produto):
    criar_produto("Torta A")
    versoes = admin_client.get("/admin/api/tempo-real").get_json()
    assert versoes["produtos"] >= 1


def test_excluir_produto_em_uso(admin_client, criar_produto, dados_orcamento):
    produto = criar_produto("Torta A")
    orcamentos.criar_orcamento(dados_orcamento, [{"produto_id": produto.id, "quantidade": 1}])

    admin_client.post(f"/admin/estoque/{produto.id}/excluir")
    assert Produto.query.count() == 1

    livre = criar_produto("Torta Livre")
    admin_client.post(f"/admin/estoque/{livre.id}/excluir")
    assert Produto.query.count() == 1


def test_converter_solicitacao(admin_client):
    admin_client.post("/solicitar-orcamento?tipo=artigos_pirotecnicos", data={
        "nome_completo": "João",
        "codigo_pais": "55",
        "whatsapp": "61982735575",
        "kit_selecionado": "Kit Casamento",
        "localizacao_evento": "Brasília",
        "data_evento": _data_futura(),
    })
    solicitacao = SolicitacaoOrcamento.query.one()
    resposta = admin_client.post(f"/admin/solicitacoes/{solicitacao.id}/converter")
    orcamento = Orcamento.query.one()
    assert resposta.headers["Location"].endswith(f"/admin/orcamentos/{orcamento.id}/editar")
    assert solicitacao.enviado_email is True


def test_pdf_sem_wkhtmltopdf_volta_ao_orcamento(admin_client, app, criar_produto, dados_orcamento, tmp_path, monkeypatch):
    monkeypatch.setitem(app.config, "WKHTMLTOPDF_PATH", str(tmp_path / "nao_existe"))
    produto = criar_produto("Torta A")
    orcamento = orcamentos.criar_orcamento(dados_orcamento, [{"produto_id": produto.id, "quantidade": 1}])
    resposta = admin_client.get(f"/admin/orcamentos/{orcamento.id}/pdf")
    assert resposta.status_code == 302
    assert resposta.headers["Location"].endswith(f"/admin/orcamentos/{orcamento.id}")


def test_seed_admin_cria_apenas_uma_vez(app):
    admin = seed_admin()
    assert admin is not None and admin.is_admin
    assert admin.check_password(app.config["ADMIN_PASSWORD"])
    assert seed_admin() is None


def test_create_admin_cria_e_redefine_senha(app):
    usuario, criado = criar_pelo_script("Novo@M5max.com.br", "senha123")
    assert criado and usuario.email == "novo@m5max.com.br"

    usuario, criado = criar_pelo_script("novo@m5max.com.br", "outra456", role="moderador")
    assert not criado
    assert usuario.role == "moderador"
    assert usuario.check_password("outra456")

    with pytest.raises(ValueError):
        criar_pelo_script("x@m5max.com.br", "123")


def test_editar_produto_com_nova_quantidade(admin_client, criar_produto):
    produto = criar_produto("Torta A", quantidade=10, valor_venda=20.0)
    resposta = admin_client.post(f"/admin/estoque/{produto.id}/editar", data={
        "codigo": produto.codigo,
        "nome_produto": "Torta A Renomeada",
        "categoria": "tortas",
        "valor_compra": "10",
        "valor_venda": "22",
        "quantidade_disponivel": "7",
        "ativo": "y",
    })
    assert resposta.status_code == 302
    assert (produto.nome_produto, produto.valor_venda, produto.quantidade_disponivel) == ("Torta A Renomeada", 22.0, 7)
    historico = HistoricoEstoque.query.one()
    assert (historico.tipo_movimentacao, historico.quantidade_anterior, historico.quantidade_atual) == ("ajuste", 10, 7)
    assert historico.usuario_id is not None
