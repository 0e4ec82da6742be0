"""
Error types raised at the admission boundary.
"""


class InvalidClient(ValueError):
    """
    A client's priority window is inverted (``priority_from > priority_to``).

    Attributes:
        client: The offending client, kept so admission reports can name it
    """

    def __init__(self, client):
        self.client = client
        super().__init__(
            f"Client {client.client_id} has an inverted priority window "
            f"({client.priority_from} > {client.priority_to})"
        )
