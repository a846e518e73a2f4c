TIPOS_ORCAMENTO = [('show_pirotecnico', 'Show Pirotécnico'), ('venda_artigos', 'Venda de Artigos')]
MODOS_PAGAMENTO = [('dinheiro', 'Dinheiro'), ('pix', 'PIX'), ('cartao', 'Cartão'), ('transferencia', 'Transferência')]

CATEGORIAS_PRODUTO = [
    ('tortas', 'Tortas'),
    ('granadas', 'Granadas'),
    ('metralhas', 'Metralhas'),
    ('acessorios', 'Acessórios'),
    ('kits', 'Kits'),
    ('rojoes', 'Rojões'),
    ('fumacas', 'Fumaças'),
    ('cascata', 'Cascata'),
    ('morteiros', 'Morteiros'),
    ('bombas', 'Bombas'),
    ('cha_revelacao', 'Chá Revelação'),
    ('lancador', 'Lançador'),
    ('papel_picado', 'Papel Picado'),
]

# Prefixo do código do produto por categoria (ex.: TOR001)
PREFIXOS_CATEGORIA = {
    'tortas': 'TOR',
    'granadas': 'GRD',
    'metralhas': 'MTL',
    'acessorios': 'ACC',
    'kits': 'KIT',
    'rojoes': 'ROJ',
    'fumacas': 'FUM',
    'cascata': 'CAS',
    'morteiros': 'MOR',
    'bombas': 'BOM',
    'cha_revelacao': 'CHR',
    'lancador': 'LAN',
    'papel_picado': 'PPD',
}
PREFIXO_PADRAO = 'PRD'

LIMITE_ESTOQUE_BAIXO = 5  # Abaixo disso o produto aparece destacado no estoque


# Valor de um item do orçamento
# Parâmetros:
#   quantidade: unidades do produto
#   valor_unitario: preço da unidade no momento em que o item foi adicionado
# Retorna: valor total do item

def calcular_valor_item(quantidade, valor_unitario):
    return round(quantidade * valor_unitario, 2)


def calcular_subtotal(itens):
    """Soma quantidade x valor_unitario dos itens (objetos ou dicts)"""
    total = 0.0
    for item in itens:
        if isinstance(item, dict):
            total += item['quantidade'] * item['valor_unitario']
        else:
            total += item.quantidade * item.valor_unitario
    return round(total, 2)


# Valor final do orçamento: a margem de lucro é aplicada sobre o subtotal
# (margem de 30% adiciona 30% ao subtotal)

def calcular_valor_total(itens, margem_lucro=0):
    subtotal = calcular_subtotal(itens)
    margem = margem_lucro or 0
    return round(subtotal + subtotal * margem / 100, 2)
