"""Repository clients and connections."""

from lars.remote.client import ReadClient, RecordStoreClient, WriteClient
from lars.remote.connection import (
    MemoryRepositoryConnection,
    RepositoryConnection,
    SingleFileRepositoryConnection,
    get_connection,
)
from lars.remote.memory import MemoryWriteClient
from lars.remote.singlefile import SingleFileWriteClient
