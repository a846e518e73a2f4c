# Estatísticas do painel administrativo
from datetime import date, datetime

from eventos import eventos_proximos
from models import Produto, Orcamento, SolicitacaoOrcamento
from orcamentos import STATUS_COM_RESERVA


def estatisticas_painel(hoje=None):
    hoje = hoje or date.today()
    inicio_mes = datetime(hoje.year, hoje.month, 1)

    produtos_ativos = Produto.query.filter_by(ativo=True).all()
    valor_estoque = sum((p.valor_compra or 0) * (p.quantidade_disponivel or 0) for p in produtos_ativos)
    valor_total_estoque = sum((p.valor_venda or 0) * (p.quantidade_disponivel or 0) for p in produtos_ativos)

    orcamentos_mes = Orcamento.query.filter(Orcamento.created_at >= inicio_mes).all()
    # Só entram no faturamento os orçamentos com produtos já retirados do estoque
    valor_orcamentos_mes = sum(o.valor_total or 0 for o in orcamentos_mes if o.status in STATUS_COM_RESERVA)

    proximos = eventos_proximos(30, hoje)
    eventos_hoje = [e for e in proximos if e.orcamento.evento_data == hoje]

    solicitacoes_pendentes = SolicitacaoOrcamento.query.filter_by(enviado_email=False).count()

    return {
        'total_produtos': len(produtos_ativos),
        'valor_estoque': round(valor_estoque, 2),
        'valor_total_estoque': round(valor_total_estoque, 2),
        'orcamentos_do_mes': len(orcamentos_mes),
        'valor_orcamentos_do_mes': round(valor_orcamentos_mes, 2),
        'eventos_proximos': len(proximos),
        'eventos_hoje': len(eventos_hoje),
        'solicitacoes_pendentes': solicitacoes_pendentes,
        'proximos': proximos[:5],
    }
