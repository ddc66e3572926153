class ErrorUtils:
    @staticmethod
    def format_error_response(message: str) -> dict:
        """
        Formats the flat error body returned by the metrics service.

        Args:
            message: Human readable message shown by the console.

        Returns:
            A dictionary of the form {"error": message}.
        """
        return {"error": message}

    @staticmethod
    def describe(error: Exception) -> str:
        """Short description of an exception for log lines and notifications."""
        text = str(error)
        return f"{type(error).__name__}: {text}" if text else type(error).__name__
