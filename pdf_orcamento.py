# Geração do PDF do orçamento (HTML renderizado pelo Jinja e convertido pelo wkhtmltopdf)
import logging
import os
from datetime import datetime

import pdfkit
from flask import current_app, render_template

from config_orcamento import MODOS_PAGAMENTO, TIPOS_ORCAMENTO, calcular_subtotal

logger = logging.getLogger(__name__)

OPCOES_PDF = {
    'encoding': 'UTF-8',
    'page-size': 'A4',
    'margin-top': '10mm',
    'margin-bottom': '10mm',
    'margin-left': '10mm',
    'margin-right': '10mm',
    'no-outline': None,
    'enable-local-file-access': None,
    'print-media-type': None,
}


class WkhtmltopdfNaoEncontradoError(RuntimeError):
    pass


def contexto_pdf(orcamento):
    subtotal = calcular_subtotal(orcamento.itens)
    return {
        'orcamento': orcamento,
        'itens': orcamento.itens,
        'subtotal': subtotal,
        'valor_margem': round(orcamento.valor_total - subtotal, 2),
        'tipo_label': dict(TIPOS_ORCAMENTO).get(orcamento.tipo, orcamento.tipo),
        'pagamento_label': dict(MODOS_PAGAMENTO).get(orcamento.modo_pagamento, orcamento.modo_pagamento),
        'empresa': {
            'nome': current_app.config['EMPRESA_NOME'],
            'telefone': current_app.config['EMPRESA_TELEFONE'],
            'email': current_app.config['EMPRESA_EMAIL'],
            'endereco': current_app.config['EMPRESA_ENDERECO'],
        },
        'data_emissao': datetime.now().strftime('%d/%m/%Y %H:%M'),
    }


def nome_arquivo(orcamento):
    return f'orcamento_{orcamento.id}_{orcamento.evento_data:%Y%m%d}.pdf'


def gerar_pdf_orcamento(orcamento):
    """Devolve os bytes do PDF do orçamento."""
    html = render_template('pdf/orcamento.html', **contexto_pdf(orcamento))
    wkhtmltopdf_path = current_app.config['WKHTMLTOPDF_PATH']
    if not os.path.exists(wkhtmltopdf_path):
        raise WkhtmltopdfNaoEncontradoError(f'wkhtmltopdf não encontrado em: {wkhtmltopdf_path}')
    config = pdfkit.configuration(wkhtmltopdf=wkhtmltopdf_path)
    pdf = pdfkit.from_string(html, False, configuration=config, options=OPCOES_PDF)
    logger.info('PDF do orçamento %s gerado (%d bytes)', orcamento.id, len(pdf))
    return pdf
