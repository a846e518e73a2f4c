"""Acesso genérico às tabelas: listagem, busca por id, inclusão, edição,
exclusão e inscrição em alterações em tempo real.

Todas as operações devolvem um ``Resultado`` (dados, erro, total). Em caso de
erro a sessão é desfeita, o erro é registrado no log, uma mensagem é exibida
ao usuário (quando há requisição em andamento) e os dados vêm vazios. Não há
nova tentativa automática.
"""
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Optional

from flask import flash, has_request_context
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

import tempo_real
from erros import ConsultaInvalidaError, RegistroNaoEncontradoError
from models import db

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Ordenacao:
    coluna: str
    ascendente: bool = True


@dataclass(frozen=True)
class Consulta:
    """Parâmetros de uma listagem.

    - filtros: igualdade ``coluna == valor`` (valores None são ignorados)
    - intervalos: ``coluna -> (minimo, maximo)``, qualquer limite pode ser None
    - busca: texto procurado (ILIKE) nas colunas de ``colunas_busca``
    - ordenacao: uma única coluna
    - pagina/limite: paginação por faixa (pagina começa em 1)
    """
    filtros: dict = field(default_factory=dict)
    intervalos: dict = field(default_factory=dict)
    busca: Optional[str] = None
    colunas_busca: tuple = ()
    ordenacao: Optional[Ordenacao] = None
    pagina: Optional[int] = None
    limite: Optional[int] = None

    def com(self, **alteracoes):
        """Cópia da consulta com os campos informados substituídos."""
        valores = {
            'filtros': self.filtros,
            'intervalos': self.intervalos,
            'busca': self.busca,
            'colunas_busca': self.colunas_busca,
            'ordenacao': self.ordenacao,
            'pagina': self.pagina,
            'limite': self.limite,
        }
        valores.update(alteracoes)
        return Consulta(**valores)

    def faixa(self):
        """Faixa (inicio, fim) inclusiva correspondente à página, ou None."""
        if self.limite is None:
            return None
        pagina = self.pagina or 1
        inicio = (pagina - 1) * self.limite
        return inicio, inicio + self.limite - 1


@dataclass
class Resultado:
    dados: Any = None
    erro: Optional[Exception] = None
    total: Optional[int] = None

    @property
    def ok(self):
        return self.erro is None


class Repositorio:
    """Operações de CRUD para um modelo SQLAlchemy.

    ``ordenacao_padrao`` e ``filtro_padrao`` são aplicados a toda listagem
    (os filtros da consulta têm precedência sobre os padrão).
    """

    def __init__(self, modelo, nome=None, ordenacao_padrao=None, filtro_padrao=None, sessao=None):
        self.modelo = modelo
        self.tabela = modelo.__tablename__
        self.nome = nome or self.tabela
        self.ordenacao_padrao = ordenacao_padrao
        self.filtro_padrao = dict(filtro_padrao or {})
        self._sessao = sessao

    @property
    def sessao(self):
        return self._sessao if self._sessao is not None else db.session

    def _coluna(self, nome):
        colunas = self.modelo.__table__.columns
        if nome not in colunas:
            raise ConsultaInvalidaError(f'Coluna "{nome}" não existe em {self.tabela}.')
        return getattr(self.modelo, nome)

    def validar(self, consulta):
        """Confere as colunas da consulta antes de qualquer acesso ao banco."""
        for nome in list(consulta.filtros) + list(consulta.intervalos) + list(consulta.colunas_busca):
            self._coluna(nome)
        if consulta.ordenacao is not None:
            self._coluna(consulta.ordenacao.coluna)
        if consulta.limite is not None and consulta.limite <= 0:
            raise ConsultaInvalidaError('O limite da página deve ser maior que zero.')
        if consulta.pagina is not None and consulta.pagina < 1:
            raise ConsultaInvalidaError('A página deve ser maior ou igual a 1.')

    def _montar(self, consulta):
        query = self.sessao.query(self.modelo)
        filtros = {**self.filtro_padrao, **consulta.filtros}
        for nome, valor in filtros.items():
            if valor is None:
                continue
            query = query.filter(self._coluna(nome) == valor)
        for nome, (minimo, maximo) in consulta.intervalos.items():
            coluna = self._coluna(nome)
            if minimo is not None:
                query = query.filter(coluna >= minimo)
            if maximo is not None:
                query = query.filter(coluna <= maximo)
        if consulta.busca and consulta.colunas_busca:
            termo = f'%{consulta.busca}%'
            query = query.filter(or_(*[self._coluna(c).ilike(termo) for c in consulta.colunas_busca]))
        return query

    def _falha(self, acao, erro):
        self.sessao.rollback()
        logger.error('Erro ao %s em %s: %s', acao, self.tabela, erro)
        if has_request_context():
            flash(f'Não foi possível {acao} em {self.nome}: {erro}', 'danger')
        return erro

    def listar(self, consulta=None):
        consulta = consulta or Consulta()
        try:
            self.validar(consulta)
            query = self._montar(consulta)
            total = query.order_by(None).count()
            ordenacao = consulta.ordenacao or self.ordenacao_padrao
            if ordenacao is not None:
                coluna = self._coluna(ordenacao.coluna)
                query = query.order_by(coluna.asc() if ordenacao.ascendente else coluna.desc())
            faixa = consulta.faixa()
            if faixa is not None:
                inicio, fim = faixa
                query = query.offset(inicio).limit(fim - inicio + 1)
            return Resultado(dados=query.all(), total=total)
        except (SQLAlchemyError, ConsultaInvalidaError) as e:
            return Resultado(dados=[], erro=self._falha('carregar os dados', e), total=0)

    def obter(self, registro_id):
        try:
            registro = self.sessao.get(self.modelo, registro_id)
            if registro is None:
                raise RegistroNaoEncontradoError(self.nome, registro_id)
            return Resultado(dados=registro)
        except (SQLAlchemyError, RegistroNaoEncontradoError) as e:
            return Resultado(erro=self._falha('carregar o item', e))

    def _atribuir(self, registro, campos):
        for nome, valor in campos.items():
            self._coluna(nome)
            setattr(registro, nome, valor)

    def inserir(self, campos):
        try:
            registro = self.modelo()
            self._atribuir(registro, campos)
            self.sessao.add(registro)
            self.sessao.commit()
            logger.info('Registro %s incluído em %s', registro.id, self.tabela)
            return Resultado(dados=registro)
        except (SQLAlchemyError, ConsultaInvalidaError) as e:
            return Resultado(erro=self._falha('criar o item', e))

    def atualizar(self, registro_id, campos):
        try:
            registro = self.sessao.get(self.modelo, registro_id)
            if registro is None:
                raise RegistroNaoEncontradoError(self.nome, registro_id)
            self._atribuir(registro, campos)
            self.sessao.commit()
            return Resultado(dados=registro)
        except (SQLAlchemyError, ConsultaInvalidaError, RegistroNaoEncontradoError) as e:
            return Resultado(erro=self._falha('atualizar o item', e))

    def remover(self, registro_id):
        try:
            registro = self.sessao.get(self.modelo, registro_id)
            if registro is None:
                raise RegistroNaoEncontradoError(self.nome, registro_id)
            self.sessao.delete(registro)
            self.sessao.commit()
            logger.info('Registro %s removido de %s', registro_id, self.tabela)
            return Resultado(dados=True)
        except (SQLAlchemyError, RegistroNaoEncontradoError) as e:
            return Resultado(dados=False, erro=self._falha('remover o item', e))

    def inscrever(self, callback, eventos=tempo_real.TODOS_EVENTOS):
        return tempo_real.inscrever(self.tabela, callback, eventos)

    @contextmanager
    def ao_vivo(self, consulta=None, transformar=None, validade=None):
        """Lista mantida atualizada enquanto o bloco ``with`` estiver aberto."""
        lista = ListaReativa(self, consulta, transformar, validade)
        try:
            yield lista
        finally:
            lista.fechar()


class ListaReativa:
    """Resultado de uma listagem guardado em cache.

    Qualquer alteração na tabela apenas marca o cache como vencido; a próxima
    leitura faz uma única nova consulta, por mais alterações que tenham chegado.
    ``transformar`` converte cada linha (ex.: em dict) para que o cache não
    dependa da sessão em que foi carregado.

    Os avisos de alteração só chegam de commits feitos neste processo. Com
    vários processos (workers) ou escritas fora da aplicação, ``validade``
    (segundos) limita por quanto tempo o cache pode ficar desatualizado.
    """

    def __init__(self, repositorio, consulta=None, transformar=None, validade=None):
        self.repositorio = repositorio
        self.consulta = consulta or Consulta()
        self.transformar = transformar
        self.validade = validade
        self.consultas_realizadas = 0
        self._resultado = None
        self._vencida = True
        self._carregada_em = None
        self._cancelar = repositorio.inscrever(self._ao_alterar)

    def _ao_alterar(self, payload):
        self._vencida = True

    @property
    def vencida(self):
        if self._vencida:
            return True
        if self.validade is None or self._carregada_em is None:
            return False
        return time.monotonic() - self._carregada_em >= self.validade

    def resultado(self):
        if self.vencida or self._resultado is None:
            # Marcada antes da consulta: alteração que chegar durante a leitura vence o cache de novo
            self._vencida = False
            self._carregada_em = time.monotonic()
            resultado = self.repositorio.listar(self.consulta)
            self.consultas_realizadas += 1
            if not resultado.ok:
                self._vencida = True
            elif self.transformar is not None:
                resultado.dados = [self.transformar(linha) for linha in resultado.dados]
            self._resultado = resultado
        return self._resultado

    @property
    def dados(self):
        return self.resultado().dados

    def invalidar(self):
        self._vencida = True

    def fechar(self):
        if self._cancelar is not None:
            self._cancelar()
            self._cancelar = None
