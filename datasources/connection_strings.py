"""
Connection Strings - two-way sync between a connection URL and its fields.

The data source settings modals let the user either paste a connection
string or fill in host, port, credentials and options one by one. This
module keeps both views of a config in agreement:

    build_connection_string(kind, config)  fields -> URL (None if incomplete)
    parse_connection_string(kind, value)   URL -> fields (ValueError if unparseable)
    sync_config(kind, config, source)      apply one direction to a config dict

Config keys: host, port, username, password, database, useSsl, useSrv,
replicaSet, authSource, readPreference, additionalOptions, protocol,
url, connectionString.
"""
import json
from typing import Any, Dict, Optional
from urllib.parse import quote, unquote, urlencode, urlsplit, parse_qsl

from loguru import logger

from constants import ConnectionKind


DEFAULT_PORTS = {
    ConnectionKind.POSTGRES: 5432,
    ConnectionKind.MYSQL: 3306,
    ConnectionKind.MONGODB: 27017,
    ConnectionKind.GRAPH: 7687,
    ConnectionKind.REDIS: 6379,
}

GRAPH_PROTOCOLS = ("bolt://", "bolt+s://", "bolt+ssc://", "neo4j://", "neo4j+s://", "neo4j+ssc://")
DEFAULT_GRAPH_PROTOCOL = "bolt://"

SOURCE_FIELDS = "fields"
SOURCE_CONNECTION_STRING = "connectionString"


def _auth(config: Dict[str, Any]) -> str:
    """'user:password@', 'user@' or '' depending on what is filled in."""
    username = config.get("username")
    if not username:
        return ""
    password = config.get("password")
    auth = quote(str(username), safe="")
    if password:
        auth += ":" + quote(str(password), safe="")
    return auth + "@"


def _split_auth(netloc: str) -> tuple[Optional[str], Optional[str], str]:
    """Split 'user:pass@hosts' into (user, password, hosts)."""
    if "@" not in netloc:
        return None, None, netloc
    userinfo, hosts = netloc.rsplit("@", 1)
    username, _, password = userinfo.partition(":")
    return unquote(username) or None, unquote(password) if password else None, hosts


# ============================================
# BUILD: fields -> connection string
# ============================================

def _build_postgres(config: Dict[str, Any]) -> Optional[str]:
    host, database = config.get("host"), config.get("database")
    if not config.get("username") or not host or not database:
        return None
    port = config.get("port") or DEFAULT_PORTS[ConnectionKind.POSTGRES]
    ssl_param = "" if config.get("useSsl", True) else "?sslmode=disable"
    return f"postgres://{_auth(config)}{host}:{port}/{database}{ssl_param}"


def _build_mysql(config: Dict[str, Any]) -> Optional[str]:
    host, database = config.get("host"), config.get("database")
    if not config.get("username") or not host or not database:
        return None
    port = config.get("port") or DEFAULT_PORTS[ConnectionKind.MYSQL]
    ssl_param = "?ssl=true" if config.get("useSsl") else ""
    return f"mysql://{_auth(config)}{host}:{port}/{database}{ssl_param}"


def _build_mongodb(config: Dict[str, Any]) -> Optional[str]:
    host = config.get("host")
    if not host:
        return None
    use_srv = bool(config.get("useSrv"))
    protocol = "mongodb+srv://" if use_srv else "mongodb://"
    port = "" if use_srv else f":{config.get('port') or DEFAULT_PORTS[ConnectionKind.MONGODB]}"
    
    params: Dict[str, str] = {}
    if config.get("replicaSet"):
        params["replicaSet"] = str(config["replicaSet"])
    if config.get("authSource"):
        params["authSource"] = str(config["authSource"])
    read_preference = config.get("readPreference")
    if read_preference and read_preference != "primary":
        params["readPreference"] = str(read_preference)
    params.update(_additional_options(config.get("additionalOptions")))
    
    query = f"?{urlencode(params)}" if params else ""
    return f"{protocol}{_auth(config)}{host}{port}/{config.get('database') or ''}{query}"


def _additional_options(raw: Any) -> Dict[str, str]:
    """additionalOptions is a JSON object, given as text or already decoded."""
    if not raw:
        return {}
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            return {}
    if not isinstance(raw, dict):
        return {}
    return {str(k): _option_value(v) for k, v in raw.items()}


def _option_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _build_graph(config: Dict[str, Any]) -> Optional[str]:
    host, port = config.get("host"), config.get("port")
    if not host or not port:
        return None
    protocol = config.get("protocol") or DEFAULT_GRAPH_PROTOCOL
    return f"{protocol}{_auth(config)}{host}:{port}/{config.get('database') or ''}"


def _build_redis(config: Dict[str, Any]) -> Optional[str]:
    host = config.get("host")
    if not host:
        return config.get("url") or None
    scheme = "rediss" if config.get("useSsl") else "redis"
    port = config.get("port") or DEFAULT_PORTS[ConnectionKind.REDIS]
    return f"{scheme}://{_auth(config)}{host}:{port}/{config.get('database') or 0}"


_BUILDERS = {
    ConnectionKind.POSTGRES: _build_postgres,
    ConnectionKind.MYSQL: _build_mysql,
    ConnectionKind.MONGODB: _build_mongodb,
    ConnectionKind.GRAPH: _build_graph,
    ConnectionKind.REDIS: _build_redis,
}


def build_connection_string(kind: ConnectionKind, config: Dict[str, Any]) -> Optional[str]:
    """
    Connection string for the given fields.
    
    Returns:
        The URL, or None when required fields are missing
    """
    return _BUILDERS[ConnectionKind(kind)](config)


# ============================================
# PARSE: connection string -> fields
# ============================================

def _parse_sql(value: str, schemes: tuple, kind: ConnectionKind) -> Dict[str, Any]:
    parts = urlsplit(value)
    if parts.scheme not in schemes or not parts.hostname:
        raise ValueError(f"Not a {kind.value} connection string")
    params = dict(parse_qsl(parts.query))
    fields = {
        "host": parts.hostname,
        "port": parts.port or DEFAULT_PORTS[kind],
        "database": parts.path.lstrip("/"),
        "username": unquote(parts.username) if parts.username else "",
        "password": unquote(parts.password) if parts.password else "",
    }
    if kind == ConnectionKind.POSTGRES:
        fields["useSsl"] = params.get("sslmode") != "disable"
    else:
        fields["useSsl"] = params.get("ssl", "").lower() == "true"
    return fields


def _parse_postgres(value: str) -> Dict[str, Any]:
    return _parse_sql(value, ("postgres", "postgresql"), ConnectionKind.POSTGRES)


def _parse_mysql(value: str) -> Dict[str, Any]:
    return _parse_sql(value, ("mysql",), ConnectionKind.MYSQL)


def _parse_mongodb(value: str) -> Dict[str, Any]:
    if value.startswith("mongodb+srv://"):
        use_srv, rest = True, value[len("mongodb+srv://"):]
    elif value.startswith("mongodb://"):
        use_srv, rest = False, value[len("mongodb://"):]
    else:
        raise ValueError("Not a MongoDB connection string")
    
    rest, _, query = rest.partition("?")
    netloc, _, database = rest.partition("/")
    username, password, hosts = _split_auth(netloc)
    if not hosts:
        raise ValueError("MongoDB connection string has no host")
    
    host, port = hosts, None
    # Single host with an explicit port; seed lists stay as they are
    if not use_srv and "," not in hosts and ":" in hosts:
        host, _, port_text = hosts.rpartition(":")
        port = int(port_text)
    
    params = dict(parse_qsl(query))
    fields: Dict[str, Any] = {
        "useSrv": use_srv,
        "host": host,
        "port": None if use_srv else (port or DEFAULT_PORTS[ConnectionKind.MONGODB]),
        "username": username or "",
        "password": password or "",
        "database": database,
        "replicaSet": params.pop("replicaSet", ""),
        "authSource": params.pop("authSource", ""),
        "readPreference": params.pop("readPreference", "primary"),
    }
    fields["additionalOptions"] = json.dumps(params) if params else ""
    return fields


def _parse_graph(value: str) -> Dict[str, Any]:
    protocol = next((p for p in GRAPH_PROTOCOLS if value.startswith(p)), None)
    if protocol is None:
        raise ValueError("Not a graph database connection string")
    rest = value[len(protocol):]
    netloc, _, database = rest.partition("/")
    username, password, host_port = _split_auth(netloc)
    host, _, port_text = host_port.rpartition(":")
    if not host or not port_text:
        raise ValueError("Graph connection string needs host and port")
    return {
        "protocol": protocol,
        "host": host,
        "port": int(port_text),
        "username": username or "",
        "password": password or "",
        "database": database,
    }


def _parse_redis(value: str) -> Dict[str, Any]:
    parts = urlsplit(value)
    if parts.scheme not in ("redis", "rediss") or not parts.hostname:
        raise ValueError("Not a Redis connection string")
    db = parts.path.lstrip("/")
    return {
        "url": value,
        "host": parts.hostname,
        "port": parts.port or DEFAULT_PORTS[ConnectionKind.REDIS],
        "username": unquote(parts.username) if parts.username else "",
        "password": unquote(parts.password) if parts.password else "",
        "database": int(db) if db.isdigit() else 0,
        "useSsl": parts.scheme == "rediss",
    }


_PARSERS = {
    ConnectionKind.POSTGRES: _parse_postgres,
    ConnectionKind.MYSQL: _parse_mysql,
    ConnectionKind.MONGODB: _parse_mongodb,
    ConnectionKind.GRAPH: _parse_graph,
    ConnectionKind.REDIS: _parse_redis,
}


def parse_connection_string(kind: ConnectionKind, value: str) -> Dict[str, Any]:
    """
    Fields encoded in a connection string.
    
    Raises:
        ValueError: The string is not a valid URL for this kind
    """
    if not value:
        raise ValueError("Empty connection string")
    return _PARSERS[ConnectionKind(kind)](value.strip())


# ============================================
# SYNC
# ============================================

def sync_config(kind: ConnectionKind, config: Dict[str, Any], source: str = SOURCE_FIELDS) -> Dict[str, Any]:
    """
    Bring connectionString and the discrete fields into agreement.
    
    Args:
        kind: Connection dialect
        config: Current config values
        source: "fields" rebuilds the string from the fields,
            "connectionString" re-derives the fields from the string
    
    Returns:
        A new config dict. An incomplete field set or an unparseable string
        leaves the config unchanged.
    """
    kind = ConnectionKind(kind)
    synced = dict(config)
    
    if source == SOURCE_CONNECTION_STRING:
        value = config.get("url") if kind == ConnectionKind.REDIS else config.get("connectionString")
        try:
            synced.update(parse_connection_string(kind, value or ""))
        except ValueError as e:
            logger.warning(f"Invalid {kind.value} connection string: {e}")
            return synced
        if kind != ConnectionKind.REDIS:
            synced["connectionString"] = value
        return synced
    
    built = build_connection_string(kind, config)
    if built:
        synced["url" if kind == ConnectionKind.REDIS else "connectionString"] = built
    return synced


def detect_kind(name: str = "", provider: str = "") -> Optional[ConnectionKind]:
    """Connection dialect of a data source, from its name and provider."""
    text = f"{name} {provider}".lower()
    if "postgres" in text:
        return ConnectionKind.POSTGRES
    if "mysql" in text:
        return ConnectionKind.MYSQL
    if "mongo" in text:
        return ConnectionKind.MONGODB
    if "graph" in text or "neo4j" in text:
        return ConnectionKind.GRAPH
    if "redis" in text:
        return ConnectionKind.REDIS
    return None


def sync_stored_config(
    kind: ConnectionKind,
    config: Dict[str, Any],
    sent: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Sync rule applied when a data source is saved.
    
    The direction follows the values the client sent: a host means the
    fields win, a connection string without one is parsed into the fields.
    
    Args:
        kind: Connection dialect
        config: Full config to store (the sent values merged over the stored ones)
        sent: Config values from the request; defaults to config
    """
    sent = config if sent is None else sent
    string_key = "url" if ConnectionKind(kind) == ConnectionKind.REDIS else "connectionString"
    if sent.get("host") or not sent.get(string_key):
        return sync_config(kind, config, SOURCE_FIELDS)
    return sync_config(kind, config, SOURCE_CONNECTION_STRING)
