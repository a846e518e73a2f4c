from flask import Flask, render_template, redirect, url_for, flash, request, jsonify, make_response, abort
from flask_login import LoginManager, login_user, logout_user, login_required, current_user
from flask_wtf.csrf import CSRFProtect
from sqlalchemy.exc import SQLAlchemyError
from functools import wraps
import logging
import math

from config import Config
from models import db, Usuario, Produto, SolicitacaoOrcamento
from forms import (
    LoginForm, ProdutoForm, AjusteEstoqueForm, OrcamentoForm, StatusOrcamentoForm,
    SolicitacaoArtigosForm, SolicitacaoEquipeForm, StatusEventoForm, ObservacoesEventoForm, ContratoEventoForm,
    FiltroCatalogoForm, FiltroOrcamentosForm, FiltroEventosForm,
)
from erros import ErroNegocio, RegistroNaoEncontradoError
from repositorio import Repositorio, Consulta, Ordenacao, ListaReativa
from models.orcamento import STATUS_ORCAMENTO
from config_orcamento import CATEGORIAS_PRODUTO, TIPOS_ORCAMENTO, MODOS_PAGAMENTO, calcular_subtotal
from pdf_orcamento import gerar_pdf_orcamento, nome_arquivo, WkhtmltopdfNaoEncontradoError
from painel import estatisticas_painel
import catalogo
import conteudo_site
import estoque
import eventos
import orcamentos
import solicitacoes
import tempo_real

logging.basicConfig(level=Config.LOG_LEVEL, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config.from_object(Config)

db.init_app(app)
csrf = CSRFProtect(app)  # Protege também os botões de ação (excluir, processar) fora de FlaskForm

login_manager = LoginManager()
login_manager.init_app(app)
login_manager.login_view = 'admin_login'
login_manager.login_message = 'Faça login para acessar o painel.'
login_manager.login_message_category = 'warning'

@login_manager.user_loader
def load_user(user_id):
    return db.session.get(Usuario, int(user_id))


def role_required(*roles):
    """Restringe acesso por papel (role); quem não tem o papel vê a página de acesso negado."""
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated:
                return redirect(url_for('admin_login', next=request.path))
            if current_user.role not in roles:
                logger.warning('Acesso negado a %s para %s (%s)', request.path, current_user.email, current_user.role)
                return redirect(url_for('acesso_negado'))
            return view_func(*args, **kwargs)
        return wrapper
    return decorator


# Repositórios genéricos usados pelas telas de listagem e pela API
repo_produtos = Repositorio(Produto, nome='produtos', ordenacao_padrao=Ordenacao('codigo'))
repo_solicitacoes = Repositorio(SolicitacaoOrcamento, nome='solicitações', ordenacao_padrao=Ordenacao('created_at', ascendente=False))

# Catálogo público: recarregado quando a tabela de produtos muda neste processo.
# Os avisos de alteração não cruzam processos; com vários workers (ou escritas
# por scripts e SQL direto) o cache fica no máximo CATALOGO_CACHE_SEGUNDOS desatualizado.
catalogo_publico = ListaReativa(
    Repositorio(Produto, nome='catálogo', ordenacao_padrao=Ordenacao('nome_produto'), filtro_padrao={'ativo': True}),
    transformar=catalogo.produto_resumo,
    validade=Config.CATALOGO_CACHE_SEGUNDOS,
)


@app.context_processor
def dados_empresa():
    return {
        'empresa': {
            'nome': app.config['EMPRESA_NOME'],
            'telefone': app.config['EMPRESA_TELEFONE'],
            'whatsapp': app.config['EMPRESA_WHATSAPP'],
            'email': app.config['EMPRESA_EMAIL'],
            'endereco': app.config['EMPRESA_ENDERECO'],
        },
        'redes_sociais': conteudo_site.REDES_SOCIAIS,
    }


@app.template_filter('moeda')
def formatar_moeda(valor):
    texto = f'{float(valor or 0):,.2f}'
    return 'R$ ' + texto.replace(',', 'X').replace('.', ',').replace('X', '.')


@app.template_filter('data')
def formatar_data(valor, formato='%d/%m/%Y'):
    return valor.strftime(formato) if valor else '-'


def pagina_atual():
    return max(request.args.get('pagina', 1, type=int), 1)


def paginacao(total, pagina, limite):
    return {'pagina': pagina, 'total': total, 'paginas': max(math.ceil(total / limite), 1)}


def ordens_catalogo(form):
    """Direções de ordenação do filtro; valores inválidos viram 'none'."""
    ordem_preco = form.ordem_preco.data if form.ordem_preco.data in catalogo.DIRECOES else catalogo.NENHUMA
    ordem_duracao = form.ordem_duracao.data if form.ordem_duracao.data in catalogo.DIRECOES else catalogo.NENHUMA
    return ordem_preco, ordem_duracao


# ===== SITE PÚBLICO =====

@app.route('/')
def index():
    return render_template(
        'public/index.html',
        kits=conteudo_site.KITS,
        servicos=conteudo_site.SERVICOS,
        etapas=conteudo_site.ETAPAS,
    )


@app.route('/produtos')
def produtos_publicos():
    form = FiltroCatalogoForm(request.args)
    ordem_preco, ordem_duracao = ordens_catalogo(form)
    produtos = catalogo.filtrar_produtos(
        catalogo_publico.dados,
        busca=form.busca.data,
        categoria=form.categoria.data if form.categoria.data else 'all',
        efeito=form.efeito.data or 'all',
        ordem_preco=ordem_preco,
        ordem_duracao=ordem_duracao,
        somente_ativos=True,
    )
    return render_template('public/produtos.html', form=form, produtos=produtos)


def dados_solicitacao(form):
    """Campos do modelo SolicitacaoOrcamento a partir do formulário enviado."""
    observacoes = form.observacoes.data or ''
    extras = []
    if form.tipo_solicitacao == 'contratar_equipe':
        if form.orcamento_estimado.data:
            extras.append(f'Orçamento estimado: {form.orcamento_estimado.data}')
        if form.duracao_evento.data:
            extras.append(f'Duração: {form.duracao_evento.data} min')
    if extras:
        observacoes = ' | '.join([observacoes] + extras) if observacoes else ' | '.join(extras)
    return {
        'tipo_solicitacao': form.tipo_solicitacao,
        'nome_completo': form.nome_completo.data.strip(),
        'whatsapp': solicitacoes.normalizar_whatsapp(form.whatsapp.data, form.codigo_pais.data),
        'email': form.email.data or None,
        'kit_selecionado': form.kit_selecionado.data if form.tipo_solicitacao == 'artigos_pirotecnicos' else None,
        'tipo_evento': form.tipo_evento.data if form.tipo_solicitacao == 'contratar_equipe' else None,
        'localizacao_evento': form.localizacao_evento.data.strip(),
        'data_evento': form.data_evento.data,
        'observacoes': observacoes or None,
    }


@app.route('/solicitar-orcamento', methods=['GET', 'POST'])
def solicitar_orcamento():
    tipo = request.values.get('tipo', 'artigos_pirotecnicos')
    form = SolicitacaoEquipeForm() if tipo == 'contratar_equipe' else SolicitacaoArtigosForm()
    if form.validate_on_submit():
        try:
            solicitacoes.registrar_solicitacao(dados_solicitacao(form))
            flash('Solicitação enviada com sucesso! Entraremos em contato em até 24 horas.', 'success')
            return redirect(url_for('index'))
        except ErroNegocio as e:
            flash(str(e), 'warning')
        except SQLAlchemyError:
            flash('Não foi possível enviar sua solicitação. Tente novamente ou fale conosco pelo WhatsApp.', 'danger')
    return render_template('public/solicitar_orcamento.html', form=form, tipo=form.tipo_solicitacao)


# ===== AUTENTICAÇÃO =====

@app.route('/admin/login', methods=['GET', 'POST'])
def admin_login():
    if current_user.is_authenticated and current_user.is_admin:
        return redirect(url_for('admin_dashboard'))
    form = LoginForm()
    if form.validate_on_submit():
        usuario = Usuario.query.filter_by(email=form.email.data.strip().lower()).first()
        if usuario and usuario.ativo and usuario.check_password(form.senha.data):
            login_user(usuario)
            logger.info('Login de %s', usuario.email)
            flash('Login realizado com sucesso!', 'success')
            if not usuario.is_admin:
                return redirect(url_for('acesso_negado'))
            destino = request.args.get('next') or ''
            return redirect(destino if destino.startswith('/admin') else url_for('admin_dashboard'))
        flash('E-mail ou senha incorretos.', 'danger')
    return render_template('admin/login.html', form=form)


@app.route('/admin/logout', methods=['GET', 'POST'])
@login_required
def admin_logout():
    logout_user()
    flash('Você saiu do painel.', 'success')
    return redirect(url_for('admin_login'))


@app.route('/admin/acesso-negado')
def acesso_negado():
    return render_template('admin/acesso_negado.html'), 403


# ===== PAINEL =====

@app.route('/admin')
@login_required
@role_required('admin')
def admin_dashboard():
    estatisticas = estatisticas_painel()
    estoque_baixo = estoque.produtos_estoque_baixo(app.config['ESTOQUE_BAIXO'])
    return render_template('admin/dashboard.html', estatisticas=estatisticas, estoque_baixo=estoque_baixo)


# ===== ESTOQUE =====

@app.route('/admin/estoque')
@login_required
@role_required('admin')
def admin_estoque():
    form = FiltroCatalogoForm(request.args)
    ordem_preco, ordem_duracao = ordens_catalogo(form)
    limite = app.config['ITENS_POR_PAGINA']
    pagina = pagina_atual()
    categoria = form.categoria.data if form.categoria.data not in (None, '', 'all') else None
    consulta = Consulta(
        filtros={'categoria': categoria},
        busca=form.busca.data or None,
        colunas_busca=('nome_produto', 'codigo', 'fabricante'),
    )
    ordenando = ordem_preco != catalogo.NENHUMA or ordem_duracao != catalogo.NENHUMA
    if ordenando:
        # Ordenação por custo-benefício é feita em memória sobre todos os produtos filtrados
        resultado = repo_produtos.listar(consulta)
        produtos = catalogo.ordenar_produtos(resultado.dados, ordem_preco, ordem_duracao)
        total = len(produtos)
        produtos = produtos[(pagina - 1) * limite:pagina * limite]
    else:
        resultado = repo_produtos.listar(consulta.com(pagina=pagina, limite=limite))
        produtos, total = resultado.dados, resultado.total
    return render_template(
        'admin/estoque.html',
        form=form,
        produtos=produtos,
        paginacao=paginacao(total, pagina, limite),
        limite_estoque_baixo=app.config['ESTOQUE_BAIXO'],
        categorias=dict(CATEGORIAS_PRODUTO),
    )


def campos_produto(form):
    return {
        'nome_produto': form.nome_produto.data.strip(),
        'categoria': form.categoria.data,
        'fabricante': form.fabricante.data or None,
        'efeito': form.efeito.data or None,
        'tubos': form.tubos.data or None,
        'duracao_segundos': form.duracao_segundos.data,
        'valor_compra': float(form.valor_compra.data),
        'valor_venda': float(form.valor_venda.data),
        'ativo': form.ativo.data,
    }


@app.route('/admin/estoque/novo', methods=['GET', 'POST'])
@login_required
@role_required('admin')
def admin_produto_novo():
    form = ProdutoForm()
    if form.validate_on_submit():
        codigo = (form.codigo.data or '').strip().upper() or catalogo.gerar_codigo_produto(form.categoria.data)
        if Produto.query.filter_by(codigo=codigo).first():
            form.codigo.errors.append('Já existe um produto com este código.')
            return render_template('admin/produto_form.html', form=form, produto=None)
        try:
            produto = Produto(codigo=codigo, quantidade_disponivel=form.quantidade_disponivel.data, **campos_produto(form))
            db.session.add(produto)
            db.session.flush()
            estoque.registrar_estoque_inicial(produto, current_user.id)
            db.session.commit()
            logger.info('Produto %s cadastrado por %s', produto.codigo, current_user.email)
            flash(f'Produto {produto.codigo} cadastrado com sucesso!', 'success')
            return redirect(url_for('admin_estoque'))
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception('Erro ao cadastrar produto %s', codigo)
            flash('Erro ao cadastrar o produto.', 'danger')
    return render_template('admin/produto_form.html', form=form, produto=None)


@app.route('/admin/estoque/<int:produto_id>/editar', methods=['GET', 'POST'])
@login_required
@role_required('admin')
def admin_produto_editar(produto_id):
    produto = db.session.get(Produto, produto_id) or abort(404)
    form = ProdutoForm(obj=produto)
    if form.validate_on_submit():
        campos = campos_produto(form)
        codigo = (form.codigo.data or '').strip().upper()
        if codigo and codigo != produto.codigo:
            if Produto.query.filter_by(codigo=codigo).first():
                form.codigo.errors.append('Já existe um produto com este código.')
                return render_template('admin/produto_form.html', form=form, produto=produto)
            campos['codigo'] = codigo
        try:
            # Campos e ajuste de quantidade (com histórico) no mesmo commit
            estoque.atualizar_produto(
                produto_id, campos, form.quantidade_disponivel.data, 'Ajuste na edição do produto', current_user.id
            )
            flash('Produto atualizado com sucesso!', 'success')
            return redirect(url_for('admin_estoque'))
        except ErroNegocio as e:
            flash(str(e), 'warning')
        except SQLAlchemyError:
            logger.exception('Erro ao atualizar produto %s', produto_id)
            flash('Erro ao atualizar o produto.', 'danger')
    return render_template('admin/produto_form.html', form=form, produto=produto)


@app.route('/admin/estoque/<int:produto_id>/excluir', methods=['POST'])
@login_required
@role_required('admin')
def admin_produto_excluir(produto_id):
    try:
        produto = catalogo.excluir_produto(produto_id)
        flash(f'Produto {produto.nome_produto} excluído.', 'success')
    except ErroNegocio as e:
        flash(str(e), 'warning')
    except SQLAlchemyError:
        logger.exception('Erro ao excluir produto %s', produto_id)
        flash('Erro ao excluir o produto.', 'danger')
    return redirect(url_for('admin_estoque'))


@app.route('/admin/estoque/<int:produto_id>/ajuste', methods=['POST'])
@login_required
@role_required('admin')
def admin_produto_ajuste(produto_id):
    form = AjusteEstoqueForm()
    if form.validate_on_submit():
        try:
            movimento = estoque.ajustar_estoque(produto_id, form.nova_quantidade.data, form.motivo.data, current_user.id)
            if movimento is None:
                flash('A quantidade informada é igual à atual.', 'info')
            else:
                flash(f'Estoque ajustado de {movimento.quantidade_anterior} para {movimento.quantidade_atual}.', 'success')
        except ErroNegocio as e:
            flash(str(e), 'warning')
        except SQLAlchemyError:
            logger.exception('Erro ao ajustar estoque do produto %s', produto_id)
            flash('Erro ao ajustar o estoque.', 'danger')
    else:
        for erros in form.errors.values():
            flash(erros[0], 'warning')
    return redirect(url_for('admin_produto_historico', produto_id=produto_id))


@app.route('/admin/estoque/<int:produto_id>/historico')
@login_required
@role_required('admin')
def admin_produto_historico(produto_id):
    produto = db.session.get(Produto, produto_id) or abort(404)
    form = AjusteEstoqueForm(nova_quantidade=produto.quantidade_disponivel)
    return render_template(
        'admin/historico.html', produto=produto, historico=estoque.historico_produto(produto_id), form=form
    )


# ===== ORÇAMENTOS =====

@app.route('/admin/orcamentos')
@login_required
@role_required('admin')
def admin_orcamentos():
    form = FiltroOrcamentosForm(request.args)
    form.validate()
    limite = app.config['ITENS_POR_PAGINA']
    pagina = pagina_atual()
    lista, total = orcamentos.buscar_orcamentos(
        status=form.status.data or None,
        tipo=form.tipo.data or None,
        data_inicio=form.data_inicio.data,
        data_fim=form.data_fim.data,
        busca=form.busca.data or None,
        pagina=pagina,
        limite=limite,
    )
    return render_template(
        'admin/orcamentos.html', form=form, orcamentos=lista, paginacao=paginacao(total, pagina, limite),
        tipos=dict(TIPOS_ORCAMENTO),
    )


def produtos_para_orcamento(orcamento=None):
    """Produtos ativos mais os já usados no orçamento (mesmo que desativados depois)."""
    produtos = Produto.query.filter_by(ativo=True).order_by(Produto.nome_produto).all()
    if orcamento is not None:
        usados = [item.produto for item in orcamento.itens if not item.produto.ativo]
        produtos.extend(usados)
    return produtos


@app.route('/admin/orcamentos/novo', methods=['GET', 'POST'])
@login_required
@role_required('admin')
def admin_orcamento_novo():
    form = OrcamentoForm()
    form.definir_produtos(produtos_para_orcamento())
    if form.validate_on_submit():
        try:
            orcamento = orcamentos.criar_orcamento(form.dados_orcamento(), form.itens_preenchidos(), current_user.id)
            flash(f'Orçamento #{orcamento.id} criado com sucesso!', 'success')
            return redirect(url_for('admin_orcamento_detalhe', orcamento_id=orcamento.id))
        except ErroNegocio as e:
            flash(str(e), 'warning')
        except SQLAlchemyError:
            logger.exception('Erro ao criar orçamento')
            flash('Erro ao salvar o orçamento.', 'danger')
    return render_template('admin/orcamento_form.html', form=form, orcamento=None, itens_bloqueados=False)


@app.route('/admin/orcamentos/<int:orcamento_id>')
@login_required
@role_required('admin')
def admin_orcamento_detalhe(orcamento_id):
    try:
        orcamento = orcamentos.obter_orcamento(orcamento_id)
    except RegistroNaoEncontradoError:
        abort(404)
    form = StatusOrcamentoForm(status=orcamento.status)
    form.status.choices = [
        (s, s.capitalize()) for s in STATUS_ORCAMENTO
        if s != orcamento.status and orcamentos.transicao_permitida(orcamento.status, s)
    ]
    return render_template(
        'admin/orcamento_detalhe.html',
        orcamento=orcamento,
        form=form,
        subtotal=calcular_subtotal(orcamento.itens),
        tipos=dict(TIPOS_ORCAMENTO),
        pagamentos=dict(MODOS_PAGAMENTO),
    )


@app.route('/admin/orcamentos/<int:orcamento_id>/editar', methods=['GET', 'POST'])
@login_required
@role_required('admin')
def admin_orcamento_editar(orcamento_id):
    try:
        orcamento = orcamentos.obter_orcamento(orcamento_id)
    except RegistroNaoEncontradoError:
        abort(404)
    itens_bloqueados = orcamento.status in orcamentos.STATUS_COM_RESERVA
    form = OrcamentoForm(obj=orcamento)
    form.definir_produtos(produtos_para_orcamento(orcamento))
    if form.validate_on_submit():
        itens = None if itens_bloqueados else form.itens_preenchidos()
        if itens is not None and not itens:
            flash('Adicione pelo menos um produto ao orçamento.', 'warning')
        else:
            try:
                orcamentos.atualizar_orcamento(orcamento_id, form.dados_orcamento(), itens)
                flash('Orçamento atualizado com sucesso!', 'success')
                return redirect(url_for('admin_orcamento_detalhe', orcamento_id=orcamento_id))
            except ErroNegocio as e:
                flash(str(e), 'warning')
            except SQLAlchemyError:
                logger.exception('Erro ao atualizar orçamento %s', orcamento_id)
                flash('Erro ao salvar o orçamento.', 'danger')
    return render_template(
        'admin/orcamento_form.html', form=form, orcamento=orcamento, itens_bloqueados=itens_bloqueados
    )


@app.route('/admin/orcamentos/<int:orcamento_id>/status', methods=['POST'])
@login_required
@role_required('admin')
def admin_orcamento_status(orcamento_id):
    form = StatusOrcamentoForm()
    if form.validate_on_submit():
        try:
            resultado = orcamentos.alterar_status(orcamento_id, form.status.data, current_user.id)
            flash(resultado.mensagem, 'success')
        except ErroNegocio as e:
            flash(str(e), 'warning')
        except SQLAlchemyError:
            logger.exception('Erro ao alterar status do orçamento %s', orcamento_id)
            flash('Erro ao atualizar o status do orçamento.', 'danger')
    else:
        flash('Status inválido.', 'warning')
    return redirect(request.referrer or url_for('admin_orcamento_detalhe', orcamento_id=orcamento_id))


@app.route('/admin/orcamentos/<int:orcamento_id>/pdf')
@login_required
@role_required('admin')
def admin_orcamento_pdf(orcamento_id):
    try:
        orcamento = orcamentos.obter_orcamento(orcamento_id)
    except RegistroNaoEncontradoError:
        abort(404)
    try:
        pdf = gerar_pdf_orcamento(orcamento)
    except (WkhtmltopdfNaoEncontradoError, OSError) as e:
        logger.error('Falha ao gerar PDF do orçamento %s: %s', orcamento_id, e)
        flash(f'Não foi possível gerar o PDF: {e}', 'danger')
        return redirect(url_for('admin_orcamento_detalhe', orcamento_id=orcamento_id))
    response = make_response(pdf)
    response.headers['Content-Type'] = 'application/pdf'
    response.headers['Content-Disposition'] = f'attachment; filename={nome_arquivo(orcamento)}'
    return response


@app.route('/admin/orcamentos/<int:orcamento_id>/excluir', methods=['POST'])
@login_required
@role_required('admin')
def admin_orcamento_excluir(orcamento_id):
    try:
        orcamentos.excluir_orcamento(orcamento_id)
        flash('Orçamento excluído.', 'success')
    except ErroNegocio as e:
        flash(str(e), 'warning')
        return redirect(url_for('admin_orcamento_detalhe', orcamento_id=orcamento_id))
    except SQLAlchemyError:
        logger.exception('Erro ao excluir orçamento %s', orcamento_id)
        flash('Erro ao excluir o orçamento.', 'danger')
    return redirect(url_for('admin_orcamentos'))


# ===== SOLICITAÇÕES =====

@app.route('/admin/solicitacoes')
@login_required
@role_required('admin')
def admin_solicitacoes():
    tipo = request.args.get('tipo') or None
    situacao = request.args.get('situacao')
    processadas = {'pendentes': False, 'processadas': True}.get(situacao)
    limite = app.config['ITENS_POR_PAGINA']
    pagina = pagina_atual()
    resultado = repo_solicitacoes.listar(Consulta(
        filtros={'tipo_solicitacao': tipo, 'enviado_email': processadas},
        pagina=pagina,
        limite=limite,
    ))
    return render_template(
        'admin/solicitacoes.html',
        solicitacoes=resultado.dados,
        paginacao=paginacao(resultado.total or 0, pagina, limite),
        tipo=tipo,
        situacao=situacao,
    )


@app.route('/admin/solicitacoes/<int:solicitacao_id>/processar', methods=['POST'])
@login_required
@role_required('admin')
def admin_solicitacao_processar(solicitacao_id):
    try:
        solicitacoes.marcar_processada(solicitacao_id)
        flash('Solicitação marcada como processada.', 'success')
    except ErroNegocio as e:
        flash(str(e), 'warning')
    except SQLAlchemyError:
        logger.exception('Erro ao processar solicitação %s', solicitacao_id)
        flash('Erro ao atualizar a solicitação.', 'danger')
    return redirect(url_for('admin_solicitacoes'))


@app.route('/admin/solicitacoes/<int:solicitacao_id>/converter', methods=['POST'])
@login_required
@role_required('admin')
def admin_solicitacao_converter(solicitacao_id):
    try:
        orcamento = solicitacoes.converter_em_orcamento(solicitacao_id, current_user.id)
        flash(f'Orçamento #{orcamento.id} gerado a partir da solicitação. Adicione os produtos.', 'success')
        return redirect(url_for('admin_orcamento_editar', orcamento_id=orcamento.id))
    except ErroNegocio as e:
        flash(str(e), 'warning')
    except SQLAlchemyError:
        logger.exception('Erro ao converter solicitação %s', solicitacao_id)
        flash('Erro ao gerar o orçamento.', 'danger')
    return redirect(url_for('admin_solicitacoes'))


@app.route('/admin/solicitacoes/<int:solicitacao_id>/excluir', methods=['POST'])
@login_required
@role_required('admin')
def admin_solicitacao_excluir(solicitacao_id):
    try:
        solicitacoes.excluir_solicitacao(solicitacao_id)
        flash('Solicitação excluída.', 'success')
    except ErroNegocio as e:
        flash(str(e), 'warning')
    except SQLAlchemyError:
        logger.exception('Erro ao excluir solicitação %s', solicitacao_id)
        flash('Erro ao excluir a solicitação.', 'danger')
    return redirect(url_for('admin_solicitacoes'))


# ===== EVENTOS =====

@app.route('/admin/eventos')
@login_required
@role_required('admin')
def admin_eventos():
    form = FiltroEventosForm(request.args)
    form.validate()
    lista = eventos.buscar_eventos(
        status=form.status.data or None,
        busca=form.busca.data or None,
        data_inicio=form.data_inicio.data,
        data_fim=form.data_fim.data,
    )
    return render_template(
        'admin/eventos.html',
        form=form,
        eventos=lista,
        status_form=StatusEventoForm(),
        observacoes_form=ObservacoesEventoForm(),
        contrato_form=ContratoEventoForm(),
    )


@app.route('/admin/eventos/<int:evento_id>/status', methods=['POST'])
@login_required
@role_required('admin')
def admin_evento_status(evento_id):
    form = StatusEventoForm()
    if form.validate_on_submit():
        try:
            eventos.atualizar_status_evento(evento_id, form.status.data)
            flash('Status do evento atualizado.', 'success')
        except ErroNegocio as e:
            flash(str(e), 'warning')
        except SQLAlchemyError:
            flash('Erro ao atualizar o evento.', 'danger')
    else:
        flash('Status inválido.', 'warning')
    return redirect(url_for('admin_eventos'))


@app.route('/admin/eventos/<int:evento_id>/observacoes', methods=['POST'])
@login_required
@role_required('admin')
def admin_evento_observacoes(evento_id):
    form = ObservacoesEventoForm()
    if form.validate_on_submit():
        try:
            eventos.salvar_observacoes(evento_id, form.observacoes.data)
            flash('Observações salvas.', 'success')
        except ErroNegocio as e:
            flash(str(e), 'warning')
        except SQLAlchemyError:
            flash('Erro ao salvar as observações.', 'danger')
    return redirect(url_for('admin_eventos'))


@app.route('/admin/eventos/<int:evento_id>/contrato', methods=['POST'])
@login_required
@role_required('admin')
def admin_evento_contrato(evento_id):
    form = ContratoEventoForm()
    if form.validate_on_submit():
        try:
            eventos.atualizar_contrato_url(evento_id, form.pdf_url.data)
            flash('Contrato atualizado.', 'success')
        except ErroNegocio as e:
            flash(str(e), 'warning')
        except SQLAlchemyError:
            flash('Erro ao salvar o contrato.', 'danger')
    else:
        for erros in form.errors.values():
            flash(erros[0], 'warning')
    return redirect(url_for('admin_eventos'))


@app.route('/admin/eventos/<int:evento_id>/excluir', methods=['POST'])
@login_required
@role_required('admin')
def admin_evento_excluir(evento_id):
    try:
        eventos.remover_evento(evento_id)
        flash('Evento removido.', 'success')
    except ErroNegocio as e:
        flash(str(e), 'warning')
    except SQLAlchemyError:
        flash('Erro ao remover o evento.', 'danger')
    return redirect(url_for('admin_eventos'))


# ===== API JSON =====

@app.route('/admin/api/produtos')
@login_required
@role_required('admin')
def api_produtos():
    ordem_preco = request.args.get('ordem_preco', catalogo.NENHUMA)
    ordem_duracao = request.args.get('ordem_duracao', catalogo.NENHUMA)
    categoria = request.args.get('categoria')
    consulta = Consulta(
        filtros={'categoria': None if categoria in (None, '', 'all') else categoria},
        busca=request.args.get('busca') or None,
        colunas_busca=('nome_produto', 'codigo', 'fabricante'),
    )
    resultado = repo_produtos.listar(consulta)
    if not resultado.ok:
        return jsonify({'error': str(resultado.erro)}), 500
    try:
        produtos = catalogo.ordenar_produtos(resultado.dados, ordem_preco, ordem_duracao)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    return jsonify({
        'produtos': [catalogo.produto_para_dict(p) for p in produtos],
        'total': len(produtos),
    })


@app.route('/admin/api/produtos/codigo')
@login_required
@role_required('admin')
def api_proximo_codigo():
    categoria = request.args.get('categoria', '')
    return jsonify({'categoria': categoria, 'codigo': catalogo.gerar_codigo_produto(categoria)})


@app.route('/admin/api/orcamentos/<int:orcamento_id>/status', methods=['POST'])
@login_required
@role_required('admin')
def api_orcamento_status(orcamento_id):
    dados = request.get_json(silent=True) or {}
    novo_status = dados.get('status')
    if not novo_status:
        return jsonify({'error': 'Informe o novo status.'}), 400
    try:
        resultado = orcamentos.alterar_status(orcamento_id, novo_status, current_user.id)
    except RegistroNaoEncontradoError as e:
        return jsonify({'error': str(e)}), 404
    except ErroNegocio as e:
        return jsonify({'error': str(e)}), 409
    except SQLAlchemyError:
        logger.exception('Erro ao alterar status do orçamento %s pela API', orcamento_id)
        return jsonify({'error': 'Erro ao atualizar o status do orçamento.'}), 500
    return jsonify({
        'id': resultado.orcamento.id,
        'status': resultado.orcamento.status,
        'status_anterior': resultado.status_anterior,
        'estoque_alterado': resultado.estoque_alterado,
        'mensagem': resultado.mensagem,
        'movimentos': [
            {
                'produto_id': m.produto.id,
                'tipo': m.tipo,
                'quantidade_anterior': m.quantidade_anterior,
                'quantidade_atual': m.quantidade_atual,
            } for m in resultado.movimentos
        ],
    })


@app.route('/admin/api/tempo-real')
@login_required
@role_required('admin')
def api_tempo_real():
    """Versão atual de cada tabela; o painel recarrega as listas cuja versão mudou."""
    return jsonify(tempo_real.versoes())


def seed_admin():
    """Cria o administrador inicial (ADMIN_EMAIL/ADMIN_PASSWORD) caso nenhum exista."""
    if Usuario.query.filter_by(role='admin').first():
        return None
    admin = Usuario(nome='Administrador', email=app.config['ADMIN_EMAIL'].lower(), role='admin')
    admin.set_password(app.config['ADMIN_PASSWORD'])
    db.session.add(admin)
    db.session.commit()
    logger.info('Administrador inicial criado: %s', admin.email)
    return admin


if __name__ == '__main__':
    with app.app_context():
        db.create_all()
        seed_admin()
    app.run(debug=True)
