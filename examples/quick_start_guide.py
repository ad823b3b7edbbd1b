#!/usr/bin/env python3
"""
Quick Start Guide for Simple XML Tree.

Walks through parsing a document, looking things up, searching, merging
and writing a tree back out.
"""

import sys
import tempfile
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from simple_xml_tree import (
    ParserConfig,
    XmlTreeParser,
    merge,
    parse,
)

LIBRARY = """<?xml version="1.0" encoding="utf-8"?>
<library city="Oslo">
    <shelf room="study">
        <book id="1" title="Dune">Herbert</book>
        <book id="2" title="Emma">Austen</book>
    </shelf>
    <shelf room="hall">
        <book id="3" title="Ulysses">Joyce</book>
    </shelf>
    <owner>Sam</owner>
</library>
"""


def quick_start_example():
    """Parse a document and navigate the result."""

    print("🚀 QUICK START - Simple XML Tree")
    print("=" * 40)

    # Step 1: Parse
    print("\n📄 Step 1: Parsing")
    print("-" * 30)

    result = parse(LIBRARY)
    print(f"✅ Success: {result.success}")
    print(f"🌳 Root: {result.tree.tag_name} {result.tree.attributes}")
    print(f"📊 Nodes built: {result.performance.nodes_built}")

    library = result.unwrap()

    # Step 2: Lookup
    print("\n🧭 Step 2: Lookup")
    print("-" * 30)

    print(f"👤 Owner: {library.find_child_by_tag('owner').get()}")
    print(f"🏙️  City: {library.lookup('city')}")
    study = library.child_trees[0]
    dune = study.find_leaf("book", "title", "Dune")
    print(f"📖 Dune was written by {dune.value}")

    # Step 3: Search
    print("\n🔍 Step 3: Search")
    print("-" * 30)

    books = library.search("book")
    for book in books.child_leaves:
        print(f"  - {book.get('title')} ({book.get('id')})")

    print(f"\n🎉 Quick start complete!")


def failure_example():
    """Show how failures are reported and recovered from."""

    print("\n\n⚠️  FAILURE HANDLING EXAMPLE")
    print("=" * 40)

    result = parse("<note>first</note><note>second</note>")
    print(f"❌ {result.failure_kind.name}: {result.error.message}")
    for index, fragment in enumerate(result.fragments, start=1):
        print(f"  Fragment {index}: {fragment}")

    lenient = XmlTreeParser(ParserConfig.lenient())
    merged = lenient.parse("<a><x/><y/></a><a><z/><w/></a>").unwrap()
    print("\n🔧 Lenient parse merged the siblings:")
    print(lenient.to_text(merged))


def merge_and_save_example():
    """Merge two trees and write the result to a file."""

    print("\n\n💾 MERGE AND SAVE EXAMPLE")
    print("=" * 40)

    left = parse('<config env="prod"><host>a.example</host><port>80</port></config>').unwrap()
    right = parse('<config env="prod"><user>svc</user><retries>3</retries></config>').unwrap()
    combined = merge(left, right)

    parser = XmlTreeParser(ParserConfig().override(serialization__indent="  "))
    with tempfile.TemporaryDirectory() as directory:
        path = parser.save(combined, Path(directory) / "config.xml")
        print(f"📁 Written to {path.name}:")
        print(path.read_text(encoding="utf-8"))


def main():
    """Main function."""
    quick_start_example()
    failure_example()
    merge_and_save_example()

    print(f"\n✅ All examples completed successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
