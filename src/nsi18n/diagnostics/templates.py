"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from nsi18n.core.paths import join_key

from .codes import ErrorCode, ErrorDetail

__all__ = ["ErrorTemplate"]


class ErrorTemplate:
    """Centralized error message templates.

    Every ErrorDetail reported by the resolver is created here, so wording
    stays consistent and tests can compare against a single source.
    """

    @staticmethod
    def unregistered_locale(locale: object) -> ErrorDetail:
        """Locale rejected by change_locale().

        Args:
            locale: The rejected locale (any object; rendered with str())

        Returns:
            ErrorDetail for UNREGISTERED_LOCALE
        """
        try:
            text = str(locale)
        except Exception:  # noqa: BLE001 - arbitrary __str__ must not break reporting
            text = "(unknown)"
        return ErrorDetail(
            code=ErrorCode.UNREGISTERED_LOCALE,
            namespace=None,
            key=text,
            message=f"The locale '{text}' is not registered.",
        )

    @staticmethod
    def invalid_namespace_syntax(namespace: object) -> ErrorDetail:
        """Namespace path is empty or malformed.

        Args:
            namespace: The rejected namespace path

        Returns:
            ErrorDetail for INVALID_NAMESPACE_SYNTAX
        """
        text = namespace if isinstance(namespace, str) else f"{type(namespace).__name__}(type)"
        return ErrorDetail(
            code=ErrorCode.INVALID_NAMESPACE_SYNTAX,
            namespace=namespace if isinstance(namespace, str) else None,
            key="",
            message=f"The namespace '{text}' must be a non-empty string.",
        )

    @staticmethod
    def invalid_key_syntax(namespace: str | None, key: object) -> ErrorDetail:
        """Key is empty or malformed.

        Args:
            namespace: Namespace of the registry, None for an external full key
            key: The rejected key

        Returns:
            ErrorDetail for INVALID_KEY_SYNTAX
        """
        text = key if isinstance(key, str) else f"{type(key).__name__}(type)"
        full_key = join_key(namespace, text)
        return ErrorDetail(
            code=ErrorCode.INVALID_KEY_SYNTAX,
            namespace=namespace,
            key=text,
            message=(
                f"The full key '{full_key}' must have at least two segments "
                "separated by a dot."
            ),
        )

    @staticmethod
    def invalid_value_type(
        namespace: str | None, key: str, value_type: str | None
    ) -> ErrorDetail:
        """Value conversion rejected the input.

        Args:
            namespace: Namespace of the registry
            key: Key the value was meant for
            value_type: Name of the rejected type, if known

        Returns:
            ErrorDetail for INVALID_VALUE_TYPE
        """
        suffix = f" '{value_type}'" if value_type else ""
        return ErrorDetail(
            code=ErrorCode.INVALID_VALUE_TYPE,
            namespace=namespace,
            key=key,
            message=f"Unacceptable value type{suffix}.",
        )

    @staticmethod
    def namespace_key_intersection(
        namespace: str, other_namespace: str, other_key: str
    ) -> ErrorDetail:
        """New namespace collides with an existing key.

        Args:
            namespace: The namespace being registered
            other_namespace: Namespace of the registry owning the key
            other_key: The colliding key, local to other_namespace

        Returns:
            ErrorDetail for NAMESPACE_KEY_INTERSECTION
        """
        return ErrorDetail(
            code=ErrorCode.NAMESPACE_KEY_INTERSECTION,
            namespace=namespace,
            key="",
            message=(
                f"The namespace '{namespace}' intersects with the key "
                f"'{other_key}' in the namespace '{other_namespace}'."
            ),
        )

    @staticmethod
    def key_namespace_intersection(
        namespace: str | None, key: str, other_namespace: str
    ) -> ErrorDetail:
        """New or changed key collides with a registered namespace.

        Args:
            namespace: Namespace of the key, None for an external full key
            key: The colliding key
            other_namespace: The registered namespace at the key's full path

        Returns:
            ErrorDetail for KEY_NAMESPACE_INTERSECTION
        """
        return ErrorDetail(
            code=ErrorCode.KEY_NAMESPACE_INTERSECTION,
            namespace=namespace,
            key=key,
            message=(
                f"The namespace '{namespace or '(null)'}' with the key '{key}' "
                f"intersects with the namespace '{other_namespace}'."
            ),
        )

    @staticmethod
    def unregistered_key(namespace: str | None, key: str) -> ErrorDetail:
        """Lookup found no value.

        Args:
            namespace: Namespace the lookup was made from
            key: Key relative to namespace

        Returns:
            ErrorDetail for UNREGISTERED_KEY
        """
        return ErrorDetail(
            code=ErrorCode.UNREGISTERED_KEY,
            namespace=namespace,
            key=key,
            message=f"The key '{join_key(namespace, key)}' is not registered.",
        )

    @staticmethod
    def circular_dependency(
        namespace: str | None, key: str, other_namespace: str, other_key: str
    ) -> ErrorDetail:
        """Borrow graph traversal came back to a visited key.

        Args:
            namespace: Namespace the traversal started from
            key: Key the traversal started from
            other_namespace: Namespace of the registry visited twice
            other_key: Key visited twice, local to other_namespace

        Returns:
            ErrorDetail for CIRCULAR_DEPENDENCY
        """
        return ErrorDetail(
            code=ErrorCode.CIRCULAR_DEPENDENCY,
            namespace=namespace,
            key=key,
            message=(
                f"Circular dependency detected for key '{join_key(namespace, key)}' "
                f"with namespace '{other_namespace}' and key '{other_key}'."
            ),
        )
