# Conteúdo fixo da página inicial (kits, serviços e etapas do atendimento)

REDES_SOCIAIS = {
    'mapa': 'https://maps.app.goo.gl/akjdi753DKvjMgkWA',
    'instagram': 'https://instagram.com/m5maxproducoes',
    'facebook': 'https://facebook.com/m5maxproducoes',
    'youtube': 'https://youtube.com/m5maxproducoes',
}

KITS = [
    {
        'nome': 'Kit Chá Revelação',
        'preco': 'R$ 750',
        'duracao': '2 min',
        'descricao': 'Perfeito para revelar o sexo do bebê',
        'destaques': ['Efeito colorido', 'Seguro', 'Fácil uso'],
    },
    {
        'nome': 'Kit Réveillon',
        'preco': 'R$ 8.500',
        'duracao': '6 min',
        'descricao': 'Celebre a virada do ano com estilo',
        'destaques': ['Show completo', 'Múltiplas cores', 'Grande duração'],
    },
    {
        'nome': 'Kit Casamento',
        'preco': 'R$ 5.000',
        'duracao': '4 min',
        'descricao': 'Torne seu casamento inesquecível',
        'destaques': ['Romântico', 'Personalizável', 'Profissional'],
    },
    {
        'nome': 'Kit Confraternização',
        'preco': 'R$ 2.000',
        'duracao': '2 min',
        'descricao': 'Para festas corporativas e eventos',
        'destaques': ['Corporativo', 'Versátil', 'Impactante'],
    },
]

SERVICOS = [
    {
        'titulo': 'Shows Pirotécnicos',
        'descricao': 'Espetáculos profissionais com equipe especializada para grandes eventos',
        'destaques': ['Equipe especializada', 'Equipamentos profissionais', 'Segurança total'],
    },
    {
        'titulo': 'Artigos Pirotécnicos',
        'descricao': 'Venda de kits especiais para suas celebrações particulares',
        'destaques': ['Kits personalizados', 'Produtos certificados', 'Entrega rápida'],
    },
    {
        'titulo': 'Consultoria Técnica',
        'descricao': 'Orientação especializada para planejamento de shows pirotécnicos',
        'destaques': ['Consultoria especializada', 'Planejamento detalhado', 'Suporte completo'],
    },
]

ETAPAS = [
    ('Solicitação', 'Entre em contato conosco via WhatsApp ou formulário para solicitar seu orçamento'),
    ('Orçamento', 'Receba sua proposta personalizada em até 24 horas com todos os detalhes'),
    ('Planejamento', 'Definimos todos os detalhes técnicos e logísticos do seu evento'),
    ('Realização', 'Desfrute do espetáculo pirotécnico no seu evento especial'),
]


def opcoes_kits():
    """Choices do campo de kit no formulário de artigos pirotécnicos."""
    return [(k['nome'], f"{k['nome']} ({k['preco']})") for k in KITS]
