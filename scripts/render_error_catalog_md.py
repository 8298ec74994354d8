from pathlib import Path

from api_errors.error_codes import ErrorCode
from api_errors.messages import BUNDLED_MESSAGES


def main() -> None:
    rows = []
    for error_code in ErrorCode:
        english = BUNDLED_MESSAGES["en"].get(error_code.translation_key, "")
        german = BUNDLED_MESSAGES["de"].get(error_code.translation_key, "")
        rows.append(
            f"| `{error_code.code}` | {error_code.http_status} | `{error_code.translation_key}` | {english} | {german} |"
        )

    table = "\n".join(rows)
    md = f"""# Error Catalog

| Code | Status | Translation key | English | German |
|---|---:|---|---|---|
{table}

## Notes
- Classified errors return the translation key in the `code` field
- Unhandled errors return `INTERNAL_SERVER_ERROR` in the `code` field
"""

    Path("error_catalog.md").write_text(md, encoding="utf-8")
    print("Wrote error_catalog.md")


if __name__ == "__main__":
    main()
