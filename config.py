# Configuração da aplicação (carregada via app.config.from_object(Config))
import os

from config_orcamento import LIMITE_ESTOQUE_BAIXO


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-change-me')

    # Qualquer URL do SQLAlchemy: Postgres hospedado em produção, SQLite local
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///m5max.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    WTF_CSRF_ENABLED = os.getenv('WTF_CSRF_ENABLED', '1') == '1'

    # Caminho do binário usado pelo pdfkit para gerar os PDFs de orçamento
    WKHTMLTOPDF_PATH = os.getenv('WKHTMLTOPDF_PATH', '/usr/bin/wkhtmltopdf')

    ITENS_POR_PAGINA = int(os.getenv('ITENS_POR_PAGINA', '20'))
    ESTOQUE_BAIXO = int(os.getenv('ESTOQUE_BAIXO', str(LIMITE_ESTOQUE_BAIXO)))  # Produtos abaixo disso aparecem no painel
    # Validade (segundos) do cache do catálogo público; cobre alterações feitas por outros workers
    CATALOGO_CACHE_SEGUNDOS = int(os.getenv('CATALOGO_CACHE_SEGUNDOS', '60'))
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Usuário administrador criado no primeiro start (ver seed_admin em app.py)
    ADMIN_EMAIL = os.getenv('ADMIN_EMAIL', 'admin@m5maxproducoes.com.br')
    ADMIN_PASSWORD = os.getenv('ADMIN_PASSWORD', 'admin123')

    # Dados de contato exibidos no site
    EMPRESA_NOME = 'M5 Max Produções'
    EMPRESA_TELEFONE = '(61) 8273-5575'
    EMPRESA_WHATSAPP = '5561982735575'
    EMPRESA_EMAIL = 'fogosm5.max@gmail.com'
    EMPRESA_ENDERECO = 'Luziânia, GO'
