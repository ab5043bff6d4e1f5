from sqlalchemy import Column, Index, LargeBinary, Text
from sqlalchemy.orm import declarative_base

# Server and client tables live in separate metadata: each side creates only its own
ServerBase = declarative_base()
ClientBase = declarative_base()


class ServerKeyPackage(ServerBase):
    __tablename__ = "server_key_package"

    package_id = Column(LargeBinary, primary_key=True, nullable=False)
    client_id = Column(Text, nullable=False)
    package = Column(LargeBinary, nullable=False)
    created_at = Column(Text, nullable=False)

    __table_args__ = (
        Index("server_idx_key_package_client_id", "client_id"),
    )

    def __repr__(self) -> str:
        return f"<ServerKeyPackage {self.package_id.hex()} client_id={self.client_id!r} created_at={self.created_at}>"


class ServerMessage(ServerBase):
    __tablename__ = "server_message"

    message_id = Column(LargeBinary, primary_key=True, nullable=False)
    recipient = Column(Text, primary_key=True, nullable=False)
    content = Column(LargeBinary, nullable=False)
    created_at = Column(Text, nullable=False)

    __table_args__ = (
        Index("server_idx_message_recipient", "recipient", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<ServerMessage {self.message_id.hex()} recipient={self.recipient!r} created_at={self.created_at}>"


class ClientUser(ClientBase):
    __tablename__ = "client_user"

    username = Column(Text, primary_key=True, nullable=False)
    signature_private_key = Column(LargeBinary, nullable=False)
    credential_with_key = Column(LargeBinary, nullable=False)

    def __repr__(self) -> str:
        # never print key material
        return f"<ClientUser {self.username!r}>"
