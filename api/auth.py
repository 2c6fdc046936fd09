"""Signed account tokens using itsdangerous."""

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from config import config


class AccountSigner:
    """Sign and verify account names."""

    def __init__(self, secret_key: str | None = None) -> None:
        """Initialize the signer with a secret key."""
        self._secret_key = secret_key or config.secret_key
        self._serializer = URLSafeTimedSerializer(self._secret_key, salt="account")

    def sign(self, account: str) -> str:
        """Create a signed token for an account."""
        return self._serializer.dumps(account)

    def unsign(self, token: str, max_age: int | None = None) -> str | None:
        """
        Verify a token and extract the account.

        Args:
            token: The signed token to verify
            max_age: Maximum age in seconds (defaults to account_token_ttl)

        Returns:
            The account if the token is valid, None otherwise
        """
        max_age = max_age or config.account_token_ttl
        try:
            return self._serializer.loads(token, max_age=max_age)
        except (BadSignature, SignatureExpired):
            return None


# Global signer instance
_account_signer: AccountSigner | None = None


def get_account_signer() -> AccountSigner:
    """Get or create the account signer."""
    global _account_signer
    if _account_signer is None:
        _account_signer = AccountSigner()
    return _account_signer


class TransferSigner:
    """
    Sign and verify transfer notices from the token contract.

    A notice names the sender, the credited account and the amount. It is
    signed with the secret shared with the token contract, under its own
    salt, so an account token can never pass as a notice.
    """

    def __init__(self, secret_key: str | None = None) -> None:
        self._serializer = URLSafeTimedSerializer(
            secret_key or config.vault.token_secret, salt="transfer"
        )

    def sign(self, sender: str, account: str, amount: int) -> str:
        """Create a signed notice; used by the token contract and in tests."""
        return self._serializer.dumps({"sender": sender, "account": account, "amount": amount})

    def verified_sender(
        self, notice: str, account: str, amount: int, max_age: int | None = None
    ) -> str | None:
        """
        Check a notice against the deposit it accompanies.

        Returns:
            The signed sender if the notice is valid, fresh and names exactly
            this account and amount, None otherwise
        """
        try:
            data = self._serializer.loads(notice, max_age=max_age or config.vault.transfer_ttl)
        except (BadSignature, SignatureExpired):
            return None
        if not isinstance(data, dict):
            return None
        if data.get("account") != account or data.get("amount") != amount:
            return None
        sender = data.get("sender")
        return sender if isinstance(sender, str) else None


_transfer_signer: TransferSigner | None = None


def get_transfer_signer() -> TransferSigner:
    """Get or create the transfer notice signer."""
    global _transfer_signer
    if _transfer_signer is None:
        _transfer_signer = TransferSigner()
    return _transfer_signer
