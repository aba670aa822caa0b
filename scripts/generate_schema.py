import json
import sys
from pathlib import Path

# Add src to path
current_dir = Path(__file__).parent
src_dir = current_dir.parent / "src"
sys.path.insert(0, str(src_dir))

from md_table_editor.types import RecordDict, TableNode
from pydantic import TypeAdapter

SCHEMAS = {
    "table-node.schema.json": TableNode,
    "table-record.schema.json": RecordDict,
}


def build_schemas():
    return {name: TypeAdapter(tp).json_schema() for name, tp in SCHEMAS.items()}


def main(output_dir=None):
    schema_dir = Path(output_dir) if output_dir else current_dir.parent / "schemas"
    schema_dir.mkdir(exist_ok=True)

    for name, schema in build_schemas().items():
        output_file = schema_dir / name
        with open(output_file, "w") as f:
            json.dump(schema, f, indent=2)
        print(f"Schema generated at: {output_file}")


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else None)
