"""
Simple code generation example.

This example demonstrates how to use the umlgen package to generate
backend descriptors and mobile bundles from a small shop diagram.
"""

import os
import argparse

from umlgen.config.settings import ProjectConfig, Settings
from umlgen.pipelines.code_generation import CodeGenerationPipeline
from umlgen.utils.data_loader import dump_json

SHOP_NODES = [
    {"id": "customer", "data": {"label": "Customer", "nodeType": "class",
                                "attributes": [{"name": "email", "type": "String"}]}},
    {"id": "order", "data": {"label": "Order", "nodeType": "class",
                             "attributes": [{"name": "total", "type": "Double"}]}},
    {"id": "item", "data": {"label": "Order Item", "nodeType": "class",
                            "attributes": [{"name": "quantity", "type": "int"}]}},
    {"id": "status", "data": {"label": "OrderStatus", "nodeType": "enum",
                              "enumValues": [{"name": "NEW"}, {"name": "PAID"}, {"name": "SHIPPED"}]}},
]

SHOP_EDGES = [
    {"id": "e1", "source": "customer", "target": "order",
     "data": {"relationshipType": "association", "sourceMultiplicity": "1", "targetMultiplicity": "*"}},
    {"id": "e2", "source": "order", "target": "item",
     "data": {"relationshipType": "composition", "sourceMultiplicity": "1", "targetMultiplicity": "1..*"}},
    {"id": "e3", "source": "order", "target": "status",
     "data": {"relationshipType": "association", "sourceMultiplicity": "*", "targetMultiplicity": "1"}},
]


def main():
    """Run the example."""
    parser = argparse.ArgumentParser(description="Code Generation Example")

    parser.add_argument(
        "--group-id",
        type=str,
        default="com.example",
        help="Group id of the generated project"
    )

    parser.add_argument(
        "--output-dir",
        type=str,
        default="output",
        help="Directory to save output files"
    )

    args = parser.parse_args()

    settings = Settings()
    settings.set("project", "group_id", args.group_id)
    settings.set("project", "name", "Shop")

    pipeline = CodeGenerationPipeline(ProjectConfig.from_settings(settings), settings)

    print(f"Generating descriptors for package {args.group_id}.shop")
    result = pipeline.execute(SHOP_NODES, SHOP_EDGES)

    if not result.success:
        print("\nGeneration failed.")
        for message in result.messages:
            if message.startswith("ERROR"):
                print(f"  {message}")
        return

    dump_json(result.to_dict(), os.path.join(args.output_dir, "shop.json"))

    print("\nGeneration completed successfully!")
    print(f"Descriptors: {result.metrics.get('descriptors', 0)}")
    print(f"Mobile bundles: {result.metrics.get('mobile_bundles', 0)}")
    print(f"Diagnostics: {result.metrics.get('diagnostics', 0)}")
    print(f"Execution time: {result.execution_time:.2f} seconds")

    order_dto = result.get_descriptor("OrderDTO")
    print(f"\nOrderDTO fields: {', '.join(order_dto.field_names())}")


if __name__ == "__main__":
    main()
