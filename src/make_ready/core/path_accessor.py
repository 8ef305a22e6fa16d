import logging


class PathAccessor:
    """Safe lookups over arbitrarily shaped JSON trees.

    Absence is never an error: every lookup resolves to a caller-supplied
    default when a key is missing, an index is out of range, or a node along
    the way is not a container.
    """

    @staticmethod
    def _split(path):
        if isinstance(path, (list, tuple)):
            return [str(part) for part in path]
        if not isinstance(path, str) or not path:
            return None
        return path.split('.')

    @staticmethod
    def get(root, path, default=None):
        """
        Return the value at a dotted key path

        Args:
            root: Parsed JSON value (dict, list or scalar)
            path (str | list): Dotted path such as 'leads.0.locations', or a list of keys
            default: Value returned when the path cannot be resolved

        Returns:
            The value found, or default when any segment is absent or the value is None
        """
        keys = PathAccessor._split(path)
        if root is None or keys is None:
            return default

        current = root
        for key in keys:
            if isinstance(current, dict):
                if key not in current:
                    return default
                current = current[key]
            elif isinstance(current, list):
                try:
                    index = int(key)
                except ValueError:
                    return default
                if index < 0 or index >= len(current):
                    return default
                current = current[index]
            else:
                return default

        return default if current is None else current

    @staticmethod
    def first_present(attribute, keys, default=None):
        """
        Return the value stored under the first present key of an attribute.

        Survey attributes store one logical value under several provenance
        keys. When the value found is itself a dict of dynamic sub-keys (or a
        multi-value list), its first value is returned.

        Args:
            attribute (dict): Attribute dict keyed by provenance
            keys (list): Ordered candidate keys, highest precedence first
            default: Value returned when no key is present
        """
        if not isinstance(attribute, dict):
            return default

        for key in keys:
            value = attribute.get(key)
            if value is None:
                continue
            if isinstance(value, dict):
                if not value:
                    continue
                first = next(iter(value.values()))
                return default if first is None else first
            if isinstance(value, list):
                if not value:
                    continue
                return default if value[0] is None else value[0]
            return value

        return default

    @staticmethod
    def first_of(root, paths, default=None):
        """Return the first non-empty value among several candidate paths"""
        for path in paths:
            value = PathAccessor.get(root, path)
            if value is None or (isinstance(value, str) and not value.strip()):
                continue
            logging.debug(f"Resolved '{path}' -> {value!r}")
            return value
        return default

    @staticmethod
    def as_list(root, path):
        """Return the list at path, or an empty list when absent or not a list"""
        value = PathAccessor.get(root, path, [])
        return value if isinstance(value, list) else []

    @staticmethod
    def as_dict(root, path):
        """Return the dict at path, or an empty dict when absent or not a dict"""
        value = PathAccessor.get(root, path, {})
        return value if isinstance(value, dict) else {}
