"""Canal de alterações em tempo real por tabela.

As alterações são coletadas a cada flush da sessão e entregues aos inscritos
somente depois do commit; um rollback descarta o que estava pendente. Cada
entrega recebe um payload no formato::

    {'schema': 'public', 'table': 'produtos', 'eventType': 'UPDATE',
     'new': {...}, 'old': {...}}

Além dos callbacks, cada tabela tem um contador de versão que sobe a cada
commit que a altera, usado pelo painel para saber quando recarregar uma lista.

Inscrições e versões vivem na memória do processo: só enxergam commits feitos
por esta aplicação neste processo, por meio do ORM (UPDATE/DELETE em massa e
SQL direto não passam pelo flush).
"""
import logging
import threading
from collections import defaultdict

from sqlalchemy import event, inspect
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

SCHEMA = 'public'
INSERT = 'INSERT'
UPDATE = 'UPDATE'
DELETE = 'DELETE'
TODOS_EVENTOS = (INSERT, UPDATE, DELETE)

_PENDENTES = 'tempo_real_pendentes'

_lock = threading.Lock()
_inscricoes = defaultdict(list)  # tabela -> [(id, eventos, callback)]
_versoes = defaultdict(int)  # tabela -> versão
_proximo_id = 0


def inscrever(tabela, callback, eventos=TODOS_EVENTOS):
    """Inscreve ``callback(payload)`` nas alterações de ``tabela``.

    Retorna a função que cancela a inscrição; quem se inscreve deve chamá-la
    ao terminar para não deixar o canal aberto.
    """
    global _proximo_id
    eventos = tuple(e.upper() for e in eventos)
    for e in eventos:
        if e not in TODOS_EVENTOS:
            raise ValueError(f'Evento de tempo real desconhecido: {e}')
    with _lock:
        _proximo_id += 1
        inscricao_id = _proximo_id
        _inscricoes[tabela].append((inscricao_id, eventos, callback))

    def cancelar():
        with _lock:
            _inscricoes[tabela] = [i for i in _inscricoes[tabela] if i[0] != inscricao_id]

    return cancelar


def total_inscricoes(tabela=None):
    with _lock:
        if tabela is not None:
            return len(_inscricoes.get(tabela, []))
        return sum(len(v) for v in _inscricoes.values())


def versao(tabela):
    with _lock:
        return _versoes.get(tabela, 0)


def versoes():
    with _lock:
        return dict(_versoes)


def _linha(obj, usar_valores_antigos=False):
    estado = inspect(obj)
    carregados = estado.dict
    dados = {}
    for attr in estado.mapper.column_attrs:
        if estado.deleted and attr.key not in carregados:
            continue  # linha já removida do banco: só os valores em memória
        valor = getattr(obj, attr.key)
        if usar_valores_antigos:
            historico = estado.attrs[attr.key].history
            if historico.deleted:
                valor = historico.deleted[0]
        dados[attr.key] = valor
    return dados


def _payload(tipo, obj):
    tabela = getattr(obj, '__tablename__', None)
    if tabela is None:
        return None
    if tipo == INSERT:
        return {'schema': SCHEMA, 'table': tabela, 'eventType': tipo, 'new': _linha(obj), 'old': {}}
    if tipo == UPDATE:
        return {
            'schema': SCHEMA, 'table': tabela, 'eventType': tipo,
            'new': _linha(obj), 'old': _linha(obj, usar_valores_antigos=True),
        }
    return {'schema': SCHEMA, 'table': tabela, 'eventType': tipo, 'new': {}, 'old': _linha(obj)}


@event.listens_for(Session, 'after_flush')
def _coletar_alteracoes(session, flush_context):
    pendentes = session.info.setdefault(_PENDENTES, [])
    for obj in session.new:
        payload = _payload(INSERT, obj)
        if payload:
            pendentes.append(payload)
    for obj in session.dirty:
        if not session.is_modified(obj, include_collections=False):
            continue
        payload = _payload(UPDATE, obj)
        if payload:
            pendentes.append(payload)
    for obj in session.deleted:
        payload = _payload(DELETE, obj)
        if payload:
            pendentes.append(payload)


@event.listens_for(Session, 'after_commit')
def _entregar_alteracoes(session):
    pendentes = session.info.pop(_PENDENTES, [])
    if pendentes:
        publicar(pendentes)


@event.listens_for(Session, 'after_rollback')
def _descartar_alteracoes(session):
    session.info.pop(_PENDENTES, None)


def publicar(payloads):
    """Entrega os payloads aos inscritos e incrementa a versão das tabelas."""
    with _lock:
        for tabela in {p['table'] for p in payloads}:
            _versoes[tabela] += 1
        destinos = {tabela: list(inscricoes) for tabela, inscricoes in _inscricoes.items()}

    for payload in payloads:
        for _, eventos, callback in destinos.get(payload['table'], []):
            if payload['eventType'] not in eventos:
                continue
            try:
                callback(payload)
            except Exception:
                # O commit já aconteceu; falha de um inscrito não afeta os demais
                logger.exception('Falha ao entregar alteração de %s a um inscrito', payload['table'])
