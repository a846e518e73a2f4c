from datetime import date, timedelta

import pytest

import solicitacoes
import tempo_real
from erros import ErroNegocio, RegistroNaoEncontradoError
from models import db, Orcamento, SolicitacaoOrcamento


def _dados(tipo="contratar_equipe", **extra):
    dados = {
        "tipo_solicitacao": tipo,
        "nome_completo": "Maria Souza",
        "whatsapp": "5561982735575",
        "email": "maria@gmail.com",
        "localizacao_evento": "Luziânia - GO",
        "data_evento": date.today() + timedelta(days=30),
        "observacoes": "Show de 5 minutos",
    }
    if tipo == "contratar_equipe":
        dados["tipo_evento"] = "Casamento"
    else:
        dados["kit_selecionado"] = "Kit Réveillon"
    dados.update(extra)
    return dados


def test_normalizar_whatsapp():
    assert solicitacoes.normalizar_whatsapp("(61) 98273-5575") == "5561982735575"
    assert solicitacoes.normalizar_whatsapp("982735575", "351") == "351982735575"
    assert solicitacoes.normalizar_whatsapp("5561982735575") == "5561982735575"
    assert solicitacoes.normalizar_whatsapp("") == ""


def test_contratar_equipe_gera_orcamento_pendente(app):
    solicitacao, orcamento = solicitacoes.registrar_solicitacao(_dados())

    assert solicitacao.enviado_email is False
    assert orcamento is not None
    assert orcamento.status == "pendente"
    assert orcamento.tipo == "show_pirotecnico"
    assert orcamento.evento_nome == "Casamento - Maria Souza"
    assert orcamento.telefone == "5561982735575"
    assert orcamento.evento_local == "Luziânia - GO"
    assert orcamento.solicitacao_id == solicitacao.id
    assert orcamento.itens == []


def test_artigos_nao_gera_orcamento(app):
    solicitacao, orcamento = solicitacoes.registrar_solicitacao(_dados("artigos_pirotecnicos"))
    assert orcamento is None
    assert solicitacao.kit_selecionado == "Kit Réveillon"
    assert Orcamento.query.count() == 0


def test_tipo_invalido(app):
    with pytest.raises(ErroNegocio):
        solicitacoes.registrar_solicitacao(_dados("outro"))
    assert SolicitacaoOrcamento.query.count() == 0


def test_converter_em_orcamento_marca_processada(app):
    solicitacao, _ = solicitacoes.registrar_solicitacao(_dados("artigos_pirotecnicos"))

    orcamento = solicitacoes.converter_em_orcamento(solicitacao.id)
    assert orcamento.tipo == "venda_artigos"
    assert orcamento.evento_nome == "Kit Réveillon - Maria Souza"
    assert db.session.get(SolicitacaoOrcamento, solicitacao.id).enviado_email is True

    # Converter de novo devolve o mesmo orçamento
    assert solicitacoes.converter_em_orcamento(solicitacao.id).id == orcamento.id
    assert Orcamento.query.count() == 1


def test_converter_equipe_reaproveita_orcamento_gerado(app):
    solicitacao, orcamento = solicitacoes.registrar_solicitacao(_dados())
    assert solicitacoes.converter_em_orcamento(solicitacao.id).id == orcamento.id


def test_marcar_processada_e_buscar(app):
    s1, _ = solicitacoes.registrar_solicitacao(_dados("artigos_pirotecnicos"))
    solicitacoes.registrar_solicitacao(_dados())
    solicitacoes.marcar_processada(s1.id)

    pendentes, total = solicitacoes.buscar_solicitacoes(processadas=False)
    assert total == 1 and pendentes[0].tipo_solicitacao == "contratar_equipe"
    artigos, total = solicitacoes.buscar_solicitacoes(tipo_solicitacao="artigos_pirotecnicos")
    assert total == 1 and artigos[0].id == s1.id


def test_excluir_mantem_orcamento(app):
    solicitacao, orcamento = solicitacoes.registrar_solicitacao(_dados())
    solicitacoes.excluir_solicitacao(solicitacao.id)

    assert SolicitacaoOrcamento.query.count() == 0
    db.session.expire_all()
    assert db.session.get(Orcamento, orcamento.id).solicitacao_id is None


def test_excluir_avisa_alteracao_do_orcamento(app):
    solicitacao, _ = solicitacoes.registrar_solicitacao(_dados())
    solicitacao_id = solicitacao.id
    recebidos = []
    cancelar = tempo_real.inscrever("orcamentos", recebidos.append)
    versao = tempo_real.versao("orcamentos")
    try:
        solicitacoes.excluir_solicitacao(solicitacao_id)
    finally:
        cancelar()

    assert [p["eventType"] for p in recebidos] == ["UPDATE"]
    assert recebidos[0]["old"]["solicitacao_id"] == solicitacao_id
    assert recebidos[0]["new"]["solicitacao_id"] is None
    assert tempo_real.versao("orcamentos") == versao + 1


def test_solicitacao_inexistente(app):
    with pytest.raises(RegistroNaoEncontradoError):
        solicitacoes.marcar_processada(999)
