#!/usr/bin/env python
"""오디언스 쿼리 검토 스크립트.

사용법:
    python scripts/review_query.py "SELECT * FROM users LIMIT 5"   # SQL 직접 입력
    python scripts/review_query.py --file query.sql                 # 파일에서 SQL 로드
    python scripts/review_query.py --catalog catalog.json "..."     # 카탈로그 JSON 지정
    python scripts/review_query.py --fix "SELECT * FROM users"      # LIMIT 자동 보정 후 검토
    python scripts/review_query.py -v "..."                         # 엔진 디버그 로그 출력
"""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from audience_query.core.catalog import Catalog
from audience_query.core.config import Settings
from audience_query.core.sample_catalog import load_sample_catalog
from audience_query.pipeline import QueryReview, QueryReviewPipeline

console = Console()


def print_review(review: QueryReview) -> None:
    """검토 결과를 패널로 출력."""
    console.print(Syntax(review.sql, "sql", theme="monokai", line_numbers=True))

    summary = Table(show_header=False, box=None)
    summary.add_column("항목", style="cyan")
    summary.add_column("값", style="yellow")
    summary.add_row("📋 참조 테이블", ", ".join(review.parsed.tables) or "-")
    summary.add_row("📑 선택 컬럼", ", ".join(review.parsed.columns) or "*")
    summary.add_row("🔍 추출 조건", f"{len(review.parsed.conditions)}건")
    summary.add_row("📅 날짜 필터", "있음" if review.safety.has_date_filter else "없음")
    summary.add_row("🔢 LIMIT", "있음" if review.safety.has_result_limit else "없음")
    summary.add_row("⚡ 최적화 뷰", "예" if review.safety.uses_optimized_view else "아니오")
    if review.safety.estimated_date_span:
        summary.add_row("🕒 기간", review.safety.estimated_date_span)

    status = (
        "[bold green]✅ 미리보기 가능[/bold green]"
        if review.can_preview
        else "[bold red]❌ 차단됨[/bold red]"
    )
    summary.add_row("📊 결과", status)
    console.print(
        Panel(
            summary,
            title="[bold blue]쿼리 검토 결과[/bold blue]",
            border_style="green" if review.can_preview else "red",
        )
    )

    if review.defect:
        body = f"line {review.defect.line_number}: {review.defect.message}"
        if review.defect.suggestion:
            body += f"\n[dim]{review.defect.suggestion}[/dim]"
        console.print(Panel(body, title="[bold red]결함[/bold red]", border_style="red"))

    for error in review.safety.errors:
        console.print(f"[red]❌ {error}[/red]")
    for warning in review.safety.warnings:
        console.print(f"[yellow]⚠️  {warning}[/yellow]")

    if review.preview is not None:
        print_preview(review)


def print_preview(review: QueryReview) -> None:
    """미리보기 행을 테이블로 출력."""
    preview = review.preview
    if not preview.rows:
        console.print("\n[dim]미리보기 결과가 없습니다.[/dim]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    columns = preview.columns
    for column in columns:
        table.add_column(column)
    for row in preview.rows:
        table.add_row(*[str(row.get(column, "")) for column in columns])

    console.print(Panel(table, title=f"[bold blue]미리보기 ({preview.row_count}행)[/bold blue]"))


def main():
    """메인 함수."""
    parser = argparse.ArgumentParser(
        description="오디언스 쿼리 안전성 검사 및 미리보기",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("sql", nargs="?", help="검토할 SQL")
    parser.add_argument("--file", type=Path, default=None, help="SQL 파일 경로")
    parser.add_argument("--catalog", type=Path, default=None, help="카탈로그 JSON 경로")
    parser.add_argument("--fix", action="store_true", help="LIMIT 누락 시 자동 보정")
    parser.add_argument("--verbose", "-v", action="store_true", help="엔진 디버그 로그 출력")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    if args.file:
        sql = args.file.read_text(encoding="utf-8")
    elif args.sql:
        sql = args.sql
    else:
        parser.error("SQL 또는 --file 중 하나를 지정해야 합니다")

    catalog = Catalog.from_json_file(args.catalog) if args.catalog else load_sample_catalog()
    policy = Settings().to_policy()
    pipeline = QueryReviewPipeline(catalog, policy)

    if args.fix:
        sql = pipeline.auto_fix(sql)

    review = pipeline.review(sql)
    print_review(review)

    sys.exit(0 if review.can_preview else 1)


if __name__ == "__main__":
    main()
