class ContextFilter:
    """
    Adds request_id and enrollment_id to log records.
    Missing values are filled with '-'.
    """
    def filter(self, record):
        if not hasattr(record, "request_id"):
            record.request_id = "-"
        if not hasattr(record, "enrollment_id"):
            record.enrollment_id = "-"
        return True
