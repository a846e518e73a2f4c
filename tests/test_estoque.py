import pytest
from sqlalchemy.exc import SQLAlchemyError

import catalogo
import estoque
import tempo_real
from erros import ErroNegocio, RegistroNaoEncontradoError
from models import db, HistoricoEstoque, Produto


def test_ajuste_registra_historico(criar_produto):
    produto = criar_produto("Torta A", quantidade=10)
    movimento = estoque.ajustar_estoque(produto.id, 4, "Inventário")

    assert produto.quantidade_disponivel == 4
    historico = estoque.historico_produto(produto.id)
    assert len(historico) == 1
    h = historico[0]
    assert (h.tipo_movimentacao, h.quantidade_anterior, h.quantidade_movimentada, h.quantidade_atual) == ("ajuste", 10, 6, 4)
    assert h.motivo == "Inventário"
    assert movimento.quantidade_atual == 4


def test_ajuste_igual_nao_registra(criar_produto):
    produto = criar_produto("Torta A", quantidade=10)
    assert estoque.ajustar_estoque(produto.id, 10, None) is None
    assert HistoricoEstoque.query.count() == 0


def test_ajuste_negativo_recusado(criar_produto):
    produto = criar_produto("Torta A", quantidade=10)
    with pytest.raises(ErroNegocio):
        estoque.ajustar_estoque(produto.id, -1, None)
    assert produto.quantidade_disponivel == 10


def test_ajuste_produto_inexistente(app):
    with pytest.raises(RegistroNaoEncontradoError):
        estoque.ajustar_estoque(999, 1, None)


def test_estoque_inicial(criar_produto):
    produto = criar_produto("Torta A", quantidade=12)
    estoque.registrar_estoque_inicial(produto)
    db.session.commit()
    h = estoque.historico_produto(produto.id)[0]
    assert (h.tipo_movimentacao, h.quantidade_anterior, h.quantidade_atual) == ("entrada", 0, 12)


def test_produtos_estoque_baixo(criar_produto):
    criar_produto("Cheio", quantidade=50)
    criar_produto("Baixo", quantidade=2)
    criar_produto("Zerado", quantidade=0)
    criar_produto("Inativo", quantidade=1, ativo=False)
    assert [p.nome_produto for p in estoque.produtos_estoque_baixo(5)] == ["Zerado", "Baixo"]


def test_excluir_produto_mantem_historico_e_avisa_alteracao(criar_produto):
    produto = criar_produto("Torta A", quantidade=10)
    estoque.ajustar_estoque(produto.id, 4, "Inventário")
    recebidos = []
    cancelar = tempo_real.inscrever("historico_estoque", recebidos.append)
    try:
        catalogo.excluir_produto(produto.id)
    finally:
        cancelar()

    assert [p["eventType"] for p in recebidos] == ["UPDATE"]
    assert recebidos[0]["new"]["produto_id"] is None
    assert HistoricoEstoque.query.one().produto_id is None


def test_atualizar_produto_grava_campos_e_ajuste_juntos(criar_produto):
    produto = criar_produto("Torta A", quantidade=10)
    _, movimento = estoque.atualizar_produto(produto.id, {"nome_produto": "Torta Nova"}, 6, "Edição")

    db.session.expire_all()
    produto = db.session.get(Produto, produto.id)
    assert (produto.nome_produto, produto.quantidade_disponivel) == ("Torta Nova", 6)
    historico = HistoricoEstoque.query.one()
    assert (historico.tipo_movimentacao, historico.quantidade_anterior, historico.quantidade_atual) == ("ajuste", 10, 6)
    assert movimento.quantidade_movimentada == 4


def test_atualizar_produto_sem_mudar_quantidade(criar_produto):
    produto = criar_produto("Torta A", quantidade=10)
    _, movimento = estoque.atualizar_produto(produto.id, {"valor_venda": 15.0}, 10, "Edição")
    assert movimento is None
    assert produto.valor_venda == 15.0
    assert HistoricoEstoque.query.count() == 0


def test_falha_no_ajuste_desfaz_a_edicao(criar_produto, monkeypatch):
    produto = criar_produto("Torta A", quantidade=10)

    def falhar(movimentos, usuario_id=None):
        raise SQLAlchemyError("falhou")

    monkeypatch.setattr(estoque, "aplicar_movimentos", falhar)
    with pytest.raises(SQLAlchemyError):
        estoque.atualizar_produto(produto.id, {"nome_produto": "Torta Nova"}, 6, "Edição")

    db.session.expire_all()
    produto = db.session.get(Produto, produto.id)
    assert (produto.nome_produto, produto.quantidade_disponivel) == ("Torta A", 10)
    assert HistoricoEstoque.query.count() == 0


def test_quantidade_negativa_nao_grava_campos(criar_produto):
    produto = criar_produto("Torta A", quantidade=10)
    with pytest.raises(ErroNegocio):
        estoque.atualizar_produto(produto.id, {"nome_produto": "Torta Nova"}, -1, "Edição")
    db.session.expire_all()
    assert db.session.get(Produto, produto.id).nome_produto == "Torta A"
