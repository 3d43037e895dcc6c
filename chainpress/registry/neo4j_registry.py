"""Neo4j-backed registry: each record is a node, chains are NEXT_CHUNK relationships."""

import os
import json
import uuid
import logging
from typing import Optional, Dict, Any, List

from neo4j import GraphDatabase
from neo4j.exceptions import Neo4jError, DriverError

from chainpress.errors import RegistryError
from chainpress.models.record import ContentRecord, RecordKind
from chainpress.registry.base import Registry

logger = logging.getLogger(__name__)

RECORD_LABEL = "Record"
ADDRESS_CONSTRAINT_NAME = "record_address"


class Neo4jRegistry(Registry):
    """Stores content records as (:Record) nodes in a Neo4j database."""

    _SOURCE_TAG = "chainpress"

    def __init__(
        self,
        uri: str = "bolt://localhost:7687",
        user: str = "neo4j",
        password: str = None,
        database: str = "neo4j",
        driver=None,
    ):
        """
        Initialize the Neo4j registry.

        Args:
            uri: Neo4j connection URI (default: bolt://localhost:7687)
            user: Neo4j username (default: neo4j)
            password: Neo4j password (if None, reads from NEO4J_PASSWORD env var)
            database: Database name (default: neo4j)
            driver: Existing driver to use instead of opening a new one
        """
        self.uri = uri
        self.user = user
        self.password = password or os.getenv("NEO4J_PASSWORD")
        self.database = database

        if driver is None and not self.password:
            raise ValueError(
                "Neo4j password is required. Set NEO4J_PASSWORD environment variable "
                "or pass it to the constructor."
            )

        self.driver = driver or GraphDatabase.driver(uri, auth=(user, self.password))
        self._schema_ready = False

    @staticmethod
    def _kind_label(kind: RecordKind) -> str:
        """Secondary node label for a record kind (ROOT, CHUNK, STANDALONE)."""
        return kind.name

    def close(self):
        """Close the Neo4j driver connection."""
        if self.driver:
            self.driver.close()

    def _run(self, query: str, **params) -> List[Any]:
        """Run a query in its own session and return all result records."""
        try:
            with self.driver.session(database=self.database) as session:
                return list(session.run(query, **params))
        except (Neo4jError, DriverError) as e:
            logger.error("Neo4j query failed: %s", e)
            raise RegistryError(f"Neo4j query failed: {e}", {"database": self.database}) from e

    def ensure_schema(self) -> None:
        """Create the unique address constraint once per registry instance."""
        if self._schema_ready:
            return
        self._run(
            f"""
            CREATE CONSTRAINT {ADDRESS_CONSTRAINT_NAME} IF NOT EXISTS
            FOR (r:{RECORD_LABEL}) REQUIRE r.address IS UNIQUE
            """
        )
        self._schema_ready = True

    def create(self, record: ContentRecord) -> str:
        self.ensure_schema()
        address = uuid.uuid4().hex
        label = self._kind_label(record.kind)
        # Single statement: the node and its forward link are committed together.
        rows = self._run(
            f"""
            CREATE (r:`{RECORD_LABEL}`:`{label}` {{
                address: $address, kind: $kind, text: $text, next: $next,
                metadata: $metadata, _source: $source, created: timestamp()
            }})
            WITH r
            OPTIONAL MATCH (n:`{RECORD_LABEL}` {{address: $next}})
            FOREACH (link IN CASE WHEN n IS NULL THEN [] ELSE [1] END |
                MERGE (r)-[:NEXT_CHUNK]->(n))
            RETURN r.address AS address
            """,
            address=address,
            kind=record.kind.value,
            text=record.text,
            next=record.next,
            metadata=json.dumps(record.metadata),
            source=self._SOURCE_TAG,
        )
        if not rows:
            raise RegistryError("Neo4j create returned no address", {"database": self.database})
        logger.debug("Created %s record %s", record.kind.name, address)
        return rows[0]["address"]

    @staticmethod
    def _node_to_record(node: Any) -> ContentRecord:
        props = dict(node)
        try:
            metadata = json.loads(props.get("metadata") or "{}")
        except ValueError:
            metadata = {}
        return ContentRecord(
            kind=RecordKind.from_tag(props.get("kind")),
            text=props.get("text") or "",
            next=props.get("next") or "",
            address=props.get("address"),
            metadata=metadata,
        )

    def get(self, address: str) -> Optional[ContentRecord]:
        rows = self._run(
            f"MATCH (r:`{RECORD_LABEL}` {{address: $address}}) RETURN r",
            address=address,
        )
        if not rows:
            return None
        return self._node_to_record(rows[0]["r"])

    def list_records(self, kind: Optional[RecordKind] = None) -> List[ContentRecord]:
        rows = self._run(
            f"""
            MATCH (r:`{RECORD_LABEL}`)
            WHERE $kind IS NULL OR r.kind = $kind
            RETURN r ORDER BY r.created
            """,
            kind=kind.value if kind is not None else None,
        )
        return [self._node_to_record(row["r"]) for row in rows]

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get statistics about stored records.

        Returns:
            Dictionary with record counts by kind, link count and orphaned chunk count
        """
        kind_rows = self._run(
            f"MATCH (r:`{RECORD_LABEL}`) RETURN r.kind AS kind, count(r) AS count ORDER BY count DESC"
        )
        link_rows = self._run("MATCH ()-[l:NEXT_CHUNK]->() RETURN count(l) AS count")
        # Chunks with no inbound link: left behind by a failed or cancelled publish
        orphan_rows = self._run(
            f"""
            MATCH (c:`{RECORD_LABEL}` {{kind: $kind}})
            WHERE NOT ()-[:NEXT_CHUNK]->(c)
            RETURN count(c) AS count
            """,
            kind=RecordKind.CHUNK.value,
        )
        by_kind: Dict[str, int] = {}
        for row in kind_rows:
            name = RecordKind.from_tag(row["kind"]).name
            by_kind[name] = by_kind.get(name, 0) + row["count"]
        return {
            "total_records": sum(by_kind.values()),
            "records_by_kind": by_kind,
            "total_links": link_rows[0]["count"] if link_rows else 0,
            "orphan_chunks": orphan_rows[0]["count"] if orphan_rows else 0,
        }
