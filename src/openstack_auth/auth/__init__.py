from .base import AuthMethod
from .noauth import NoAuth
from .identity import Identity
from .password import PasswordAuth
from .methods import FederatedMethod, IdentityMethod, PasswordMethod, TokenMethod
from .types import AuthState, Scope, Token
from .factory import AuthMethodFactory, from_config, from_env
from .error_parser import error_for_response, extract_error_message, raise_for_identity_status
