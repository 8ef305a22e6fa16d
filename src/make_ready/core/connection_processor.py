import logging

from .path_accessor import PathAccessor
from .field_paths import SURVEY_CONNECTION_TYPE_PATHS
from .pole_matcher import PoleMatcher
from .utils import Utils


class ConnectionProcessor:
    """Walks survey connections: neighbours, span lookup and mid-span measurements"""

    def __init__(self, survey):
        self.survey = survey or {}
        self.nodes = PathAccessor.as_dict(self.survey, 'nodes')
        self.connections = PathAccessor.as_dict(self.survey, 'connections')
        self.photos = PathAccessor.as_dict(self.survey, 'photos')

    def connections_for(self, node_id):
        """Connections touching node_id, in document order, as (connection_id, connection) tuples"""
        if node_id is None:
            return []
        touching = []
        for conn_id, conn in self.connections.items():
            if not isinstance(conn, dict):
                continue
            if conn.get('node_id_1') == node_id or conn.get('node_id_2') == node_id:
                touching.append((conn_id, conn))
        return touching

    @staticmethod
    def far_node_id(conn, node_id):
        if conn.get('node_id_1') == node_id:
            return conn.get('node_id_2')
        if conn.get('node_id_2') == node_id:
            return conn.get('node_id_1')
        return None

    @staticmethod
    def connection_type(conn):
        value = PathAccessor.first_of(conn, SURVEY_CONNECTION_TYPE_PATHS)
        if value is None:
            value = conn.get('button')
        return str(value) if value is not None else ''

    @staticmethod
    def is_underground(conn):
        if not isinstance(conn, dict):
            return False
        button = str(conn.get('button') or '').lower()
        return button == 'underground_path' or 'underground' in ConnectionProcessor.connection_type(conn).lower()

    @staticmethod
    def is_guy(conn):
        button = str(conn.get('button') or '').lower()
        return 'guy' in ConnectionProcessor.connection_type(conn).lower() or 'anchor' in button

    def span_connections(self, node_id):
        """Aerial span connections touching node_id (guys, anchors and underground paths excluded)"""
        return [conn for _, conn in self.connections_for(node_id)
                if not self.is_guy(conn) and not self.is_underground(conn)]

    def canonical_far_pole(self, conn, node_id):
        far_id = self.far_node_id(conn, node_id)
        if far_id is None or far_id not in self.nodes:
            return None
        return PoleMatcher.canonical_id_for(self.nodes[far_id])

    def resolve_to_pole(self, node_id):
        """Canonical id of the first connected survey pole, or None"""
        for conn_id, conn in self.connections_for(node_id):
            canonical = self.canonical_far_pole(conn, node_id)
            if canonical:
                logging.debug(f"Connection {conn_id}: {node_id} -> {canonical}")
                return canonical
        return None

    def connection_to(self, node_id, target_canonical_id):
        """The survey connection from node_id to the pole with the given canonical id, or None"""
        if not target_canonical_id:
            return None
        for _, conn in self.connections_for(node_id):
            if self.canonical_far_pole(conn, node_id) == target_canonical_id:
                return conn
        return None

    def _section_wires(self, conn):
        for section in PathAccessor.as_dict(conn, 'sections').values():
            yield from PathAccessor.as_dict(section, 'photofirst_data.wire').values()

            photos = PathAccessor.get(section, 'photos', {})
            if isinstance(photos, list):
                photo_ids = [photo for photo in photos if isinstance(photo, str)]
            elif isinstance(photos, dict):
                photo_ids = [value if isinstance(value, str) else key for key, value in photos.items()]
            else:
                photo_ids = []

            for photo_id in photo_ids:
                yield from PathAccessor.as_dict(self.photos.get(photo_id), 'photofirst_data.wire').values()

    def midspan_height_inches(self, conn, trace_ids):
        """
        Measured mid-span height of a traced wire on one connection

        Args:
            conn (dict): Survey connection with sections
            trace_ids (list): Trace ids that identify the wire

        Returns:
            float: Height in inches, or None if no section photo measures the wire
        """
        if not isinstance(conn, dict) or not trace_ids:
            return None
        for wire in self._section_wires(conn):
            if not isinstance(wire, dict) or wire.get('_trace') not in trace_ids:
                continue
            height = Utils.to_number(wire.get('_measured_height'))
            if height is not None:
                return height
        return None
