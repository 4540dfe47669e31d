#!/usr/bin/env python3
# run_enrichment.py
"""
Enrich the whole catalog in resumable batches.

Runs against the DynamoDB tables named in the environment, or against an
in-memory catalog seeded from a CSV export with --local-csv.
"""
import argparse
import json
import logging
import time

from romance_catalog import (
    BookEnricher,
    CatalogCSVImporter,
    DynamoCatalogStore,
    EnrichmentOrchestrator,
    InMemoryCatalogStore,
    Settings,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Enrich romance catalog records from Open Library and Google Books")
    parser.add_argument("--offset", type=int, default=0, help="Catalog offset to resume from")
    parser.add_argument("--batch-size", type=int, default=None, help="Records per batch")
    parser.add_argument("--book-id", action="append", dest="book_ids", help="Restrict to these ids (repeatable)")
    parser.add_argument("--force", action="store_true", help="Refresh records that were already enriched")
    parser.add_argument("--local-csv", help="Seed an in-memory catalog from this CSV instead of DynamoDB")
    parser.add_argument("--output", help="Write the final catalog as JSON (in-memory runs only)")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    logging.getLogger().setLevel(settings.log_level)

    if args.local_csv:
        store = InMemoryCatalogStore()
        stats = CatalogCSVImporter(store).import_csv(args.local_csv)
        print(f"📚 Seeded {stats.imported} books from {args.local_csv} ({stats.rejected} rejected)")
    else:
        store = DynamoCatalogStore.from_settings(settings)

    orchestrator = EnrichmentOrchestrator(
        enricher=BookEnricher(google_api_key=settings.google_books_api_key),
        store=store,
        delay_seconds=settings.enrichment_delay_seconds,
        batch_size=args.batch_size or settings.enrichment_batch_size,
    )

    print("🚀 Starting catalog enrichment...")
    print("=" * 60)
    start_time = time.time()

    offset = args.offset
    totals = {"processed": 0, "updated": 0, "no_data": 0, "skipped": 0, "errors": 0}
    while True:
        stats = orchestrator.run_batch(offset=offset, book_ids=args.book_ids, force=args.force)
        totals["processed"] += stats.total_processed
        totals["updated"] += stats.updated
        totals["no_data"] += stats.no_data_found
        totals["skipped"] += stats.skipped
        totals["errors"] += stats.errors
        print(f"📦 Batch at offset {offset}: {stats.updated}/{stats.total_processed} updated")

        if stats.exhausted:
            break
        offset = stats.next_offset

    elapsed = time.time() - start_time
    print("\n" + "=" * 60)
    print("✅ COMPLETE!")
    print(f"⏱️  Total time: {elapsed/60:.1f} minutes")
    print(
        f"📊 {totals['processed']} processed, {totals['updated']} updated, "
        f"{totals['no_data']} without new data, {totals['skipped']} skipped, {totals['errors']} errors"
    )

    if args.output and isinstance(store, InMemoryCatalogStore):
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump([book.to_dict() for book in store.books.values()], f, indent=2)
        print(f"📄 Catalog JSON: {args.output}")

    return totals


if __name__ == "__main__":
    main()
