import json, requests
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from colorama import Fore
from tqdm import tqdm

from ..errors import EnvelopeStatusError, TransportError

STATUS_OK = "1"
DEFAULT_TIMEOUT = 30

# explorer item key -> RawEntry attribute
_ITEM_FIELDS = {
    "ABI": "abi",
    "ContractName": "contract_name",
    "CompilerVersion": "compiler_version",
    "OptimizationUsed": "optimization_used",
    "Runs": "runs",
    "ConstructorArguments": "constructor_arguments",
    "EVMVersion": "evm_version",
    "Library": "library",
    "LicenseType": "license_type",
    "Proxy": "proxy",
    "Implementation": "implementation",
    "SwarmSource": "swarm_source",
}


@dataclass
class RawEntry:
    source_code: str
    abi: str = ""
    contract_name: str = ""
    compiler_version: str = ""
    optimization_used: str = ""
    runs: str = ""
    constructor_arguments: str = ""
    evm_version: str = ""
    library: str = ""
    license_type: str = ""
    proxy: str = ""
    implementation: str = ""
    swarm_source: str = ""
    # set only when the response body was not an envelope at all
    is_one_source: bool = False

    @classmethod
    def from_api_item(cls, item: Dict[str, Any]) -> "RawEntry":
        kwargs = {attr: _as_text(item.get(key)) for key, attr in _ITEM_FIELDS.items()}
        return cls(source_code=_as_text(item.get("SourceCode")), **kwargs)

    def metadata(self) -> Dict[str, str]:
        return {attr: getattr(self, attr) for attr in _ITEM_FIELDS.values()}


@dataclass
class Envelope:
    status: str
    message: str
    result: List[RawEntry] = field(default_factory=list)
    raw_result: Any = None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


#envelope decoding

def decode_envelope(body: str) -> Optional[Envelope]:
    """Decode an explorer response body, or return None when it is not an envelope."""
    try:
        data = json.loads(body)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None

    status = data.get("status")
    message = data.get("message")
    result = data.get("result")

    # status/message must be strings (null counts as ""), anything else is not an envelope
    if not isinstance(status, (str, type(None))) or not isinstance(message, (str, type(None))):
        return None
    status, message = status or "", message or ""

    # error envelopes carry a string result, so their shape is not checked
    if status != STATUS_OK:
        return Envelope(status, message, raw_result=result)

    if result is None:
        result = []
    if not isinstance(result, list) or not all(isinstance(item, dict) for item in result):
        return None
    return Envelope(status, message, [RawEntry.from_api_item(item) for item in result], result)


# public API

def contract_url(endpoint: str, address: str, api_key: str) -> str:
    return f"{endpoint.rstrip('/')}/api?module=contract&action=getsourcecode&address={address}&apikey={api_key}"


def redact(url: str) -> str:
    key = "apikey="
    idx = url.find(key)
    if idx == -1:
        return url
    start = idx + len(key)
    end = url.find("&", start)
    if end == -1:
        end = len(url)
    return url[:start] + "<redacted>" + url[end:]


def get_body(url: str, timeout: float = DEFAULT_TIMEOUT) -> requests.Response:
    try:
        return requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise TransportError(f"request to {redact(url)} failed: {e}") from e


def fetch(endpoint: str, address: str, api_key: str, timeout: float = DEFAULT_TIMEOUT) -> List[RawEntry]:
    resp = get_body(contract_url(endpoint, address, api_key), timeout=timeout)
    if not resp.ok:
        tqdm.write(Fore.YELLOW + f"[i] explorer answered HTTP {resp.status_code}; parsing the body anyway")
    body = resp.content.decode("utf-8", "surrogateescape")

    envelope = decode_envelope(body)
    if envelope is None:
        return [RawEntry(source_code=body, is_one_source=True)]

    if envelope.status != STATUS_OK:
        raise EnvelopeStatusError(envelope.status, envelope.message, envelope.raw_result)

    return envelope.result
