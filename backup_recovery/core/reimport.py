"""
SST Reimport Driver

Re-ingests exported backup files into a second cluster. The backup service
only returns file names and key ranges, so the import metadata (checksum,
length, column family, target region) is rebuilt from each file's content
before the files are staged on every store and ingested in one request.
"""

import logging
from typing import List, Optional, Sequence, Tuple, Union

from connection_management import Cluster, ClusterConnection, RpcContext
from utils.identifiers import IdentifierSource, default_identifier_source
from ..exceptions import BackupRecoveryError, ChecksumMismatchError, IngestError, SstDownloadError
from ..models.entities import (
    BackupFile,
    BackupResponse,
    ChecksumAlgorithm,
    DownloadRequest,
    KeyRange,
    MultiIngestRequest,
    SstMeta,
    StorageBackend,
)
from ..models.file_name import name_to_cf
from ..utils.checksum import ChecksumCalculator
from .local_backend import LocalStorageBackend, create_storage

logger = logging.getLogger(__name__)

# (import metadata, backup file name)
StagedSst = Tuple[SstMeta, str]


class SstReimportDriver:
    """
    Downloads and ingests backup files into a target cluster.

    Nothing here is retried: the import service is assumed to be either fully
    available or broken, and any RPC failure or error response is fatal.

    Workflow:
        1. build_metas: read every file, derive its SstMeta
        2. stage: send one download per (meta, file) to every store
        3. ingest: one multi-ingest with all metas to the region leader

    Example:
        ```python
        driver = SstReimportDriver(target_cluster)
        driver.reimport(responses, make_local_backend(run_dir))
        ```
    """

    def __init__(
        self,
        target: Union[Cluster, ClusterConnection],
        ids: Optional[IdentifierSource] = None
    ):
        """
        Initialize the driver.

        Args:
            target: Cluster receiving the files
            ids: Source of SST uuids; random by default
        """
        self._connection = target if isinstance(target, ClusterConnection) else ClusterConnection(target, "target")
        self._ids = ids or default_identifier_source()
        self._sha256 = ChecksumCalculator(ChecksumAlgorithm.SHA256)

    @property
    def connection(self) -> ClusterConnection:
        return self._connection

    def reimport(self, responses: Sequence[BackupResponse], backend: StorageBackend) -> None:
        """
        Import every file of every response into the target cluster.

        Args:
            responses: Backup frames whose files should be imported
            backend: Storage backend the files were exported to

        Raises:
            StorageReadError: If a file cannot be read
            ChecksumMismatchError: If a file does not match its recorded SHA-256
            UnknownColumnFamilyError: If a file name names no known column family
            SstDownloadError: If staging a file fails on any store
            IngestError: If the ingest fails or reports an error
        """
        storage = create_storage(backend)
        context = self._connection.new_rpc_context(b"")
        staged = self.build_metas(responses, storage, context)
        self.stage(staged, backend)
        self.ingest(staged)

    def build_metas(
        self,
        responses: Sequence[BackupResponse],
        storage: LocalStorageBackend,
        context: RpcContext
    ) -> List[StagedSst]:
        """
        Derive import metadata for every file.

        Every file is checked against the SHA-256 its backup response
        recorded. Each meta gets a fresh uuid, the target region's id and
        epoch, the CRC-32 and length of the file content, the column family
        named by the file and the file's key range.
        """
        staged: List[StagedSst] = []
        for response in responses:
            for backup_file in response.files:
                content = storage.read(backup_file.name)
                self._verify_content(backup_file, content)
                meta = SstMeta(
                    uuid=self._ids.new_uuid(),
                    range=KeyRange(start=backup_file.start_key, end=backup_file.end_key),
                    crc32=ChecksumCalculator.crc32(content),
                    length=len(content),
                    cf_name=name_to_cf(backup_file.name).value,
                    region_id=context.region_id,
                    region_epoch=context.region_epoch,
                )
                staged.append((meta, backup_file.name))
        logger.info(f"Built import metadata for {len(staged)} file(s) into region {context.region_id}")
        return staged

    def _verify_content(self, backup_file: BackupFile, content: bytes) -> None:
        if not backup_file.sha256:
            logger.debug(f"{backup_file.name} carries no SHA-256, content not verified")
            return
        expected = backup_file.sha256.hex()
        if not self._sha256.verify_data_checksum(content, expected):
            raise ChecksumMismatchError(
                backup_file.name, expected, self._sha256.calculate_data_checksum(content)
            )

    def stage(self, staged: Sequence[StagedSst], backend: StorageBackend) -> None:
        """
        Download every file onto every store of the target cluster.

        Raises:
            SstDownloadError: If a download fails or its response carries an error
        """
        for store_id, client in self._connection.import_clients():
            for meta, name in staged:
                request = DownloadRequest(storage_backend=backend, name=name, sst=meta)
                try:
                    response = client.download(request)
                except BackupRecoveryError:
                    raise
                except Exception as e:
                    logger.error(f"Download of {name} to store {store_id} failed: {e}")
                    raise SstDownloadError(f"Download failed: {e}", store_id, name) from e
                if response.error is not None:
                    logger.error(f"Store {store_id} rejected {name}: {response.error.message}")
                    raise SstDownloadError(
                        f"Download rejected: {response.error.message}",
                        store_id,
                        name,
                        {"response": response},
                    )
            logger.debug(f"Staged {len(staged)} file(s) on store {store_id}")

    def ingest(self, staged: Sequence[StagedSst]) -> None:
        """
        Ingest all staged files in one atomic request.

        The request goes to the leader store of the region the metas were
        built for.

        Raises:
            IngestError: If the ingest fails or its response carries an error
        """
        context = self._connection.new_rpc_context(b"")
        store_id = context.store_id
        client = self._connection.import_client(store_id)
        request = MultiIngestRequest(context=context, ssts=[meta for meta, _ in staged])
        try:
            response = client.multi_ingest(request)
        except BackupRecoveryError:
            raise
        except Exception as e:
            logger.error(f"Multi-ingest on store {store_id} failed: {e}")
            raise IngestError(f"Multi-ingest failed: {e}", store_id) from e
        if response.has_error:
            logger.error(f"Multi-ingest on store {store_id} reported: {response.error.message}")
            raise IngestError(f"Multi-ingest reported an error: {response.error.message}", store_id, response)
        logger.info(f"Ingested {len(request.ssts)} SST(s) through store {store_id}")
