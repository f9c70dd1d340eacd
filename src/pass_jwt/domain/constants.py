from enum import Enum

MAX_TOKEN_LENGTH = 1024
MAX_ISSUER_LENGTH = 256
MAX_INTRINSIC_LENGTH = 1024


class Algorithm(Enum):
    RS256 = "RS256"
    RS384 = "RS384"
    RS512 = "RS512"
    PS256 = "PS256"
    PS384 = "PS384"
    PS512 = "PS512"
    ES256 = "ES256"
    ES384 = "ES384"
    ES512 = "ES512"
    HS256 = "HS256"
    HS384 = "HS384"
    HS512 = "HS512"
    EDDSA = "EdDSA"


class KeyType(Enum):
    RSA = "RSA"
    EC = "EC"
    OKP = "OKP"
    OCT = "oct"


class ChallengePurpose(Enum):
    ENROLL_DEVICE = "enroll-device"
    AUTHENTICATE_SESSION = "authenticate-session"
