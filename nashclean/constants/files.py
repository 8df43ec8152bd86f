class Dirs:
    RAW: str = "raw"
    PROCESSED: str = "processed"
    SUMMARY_STATS: str = "summary_stats"
    VALIDATION_ERRORS: str = "validation_errors"

    @classmethod
    def project_dirs(cls) -> tuple[str, ...]:
        return cls.RAW, cls.PROCESSED, cls.SUMMARY_STATS, cls.VALIDATION_ERRORS


class Processed:
    SUFFIX_TMP: str = ".tmp"
