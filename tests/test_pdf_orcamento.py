import pytest

import orcamentos
import pdf_orcamento


@pytest.fixture
def orcamento(criar_produto, dados_orcamento):
    produto = criar_produto("Torta 100 Tiros", quantidade=10, valor_venda=150.0)
    dados_orcamento["margem_lucro"] = 10
    return orcamentos.criar_orcamento(dados_orcamento, [{"produto_id": produto.id, "quantidade": 2}])


def test_contexto_do_pdf(app, orcamento):
    contexto = pdf_orcamento.contexto_pdf(orcamento)
    assert contexto["subtotal"] == 300.0
    assert contexto["valor_margem"] == 30.0
    assert contexto["tipo_label"] == "Show Pirotécnico"
    assert contexto["pagamento_label"] == "PIX"
    assert pdf_orcamento.nome_arquivo(orcamento).startswith(f"orcamento_{orcamento.id}_")


def test_gerar_pdf_usa_wkhtmltopdf_configurado(app, orcamento, tmp_path, monkeypatch):
    binario = tmp_path / "wkhtmltopdf"
    binario.write_text("")
    monkeypatch.setitem(app.config, "WKHTMLTOPDF_PATH", str(binario))
    chamadas = {}

    def from_string(html, saida, configuration=None, options=None):
        chamadas["html"] = html
        chamadas["options"] = options
        return b"%PDF-1.4"

    monkeypatch.setattr(pdf_orcamento.pdfkit, "configuration", lambda wkhtmltopdf: wkhtmltopdf)
    monkeypatch.setattr(pdf_orcamento.pdfkit, "from_string", from_string)

    with app.test_request_context():
        pdf = pdf_orcamento.gerar_pdf_orcamento(orcamento)

    assert pdf == b"%PDF-1.4"
    assert "Torta 100 Tiros" in chamadas["html"]
    assert "R$ 330,00" in chamadas["html"]
    assert chamadas["options"]["page-size"] == "A4"


def test_sem_wkhtmltopdf(app, orcamento, tmp_path, monkeypatch):
    monkeypatch.setitem(app.config, "WKHTMLTOPDF_PATH", str(tmp_path / "nao_existe"))
    with app.test_request_context():
        with pytest.raises(pdf_orcamento.WkhtmltopdfNaoEncontradoError):
            pdf_orcamento.gerar_pdf_orcamento(orcamento)
