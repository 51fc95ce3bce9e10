# fitcoach/scripts/decode_report.py
# 저장해 둔 LLM 응답 파일을 블록 단위로 디코딩해서 점검
# 사용: python -m fitcoach.scripts.decode_report responses.txt
# 블록 구분: "---" 한 줄
import sys
from typing import List

from fitcoach.models.outcome import Failure
from fitcoach.models.schemas import Recipe
from fitcoach.services.decoder.pipeline import decode, get_stats
from fitcoach.services.decoder.stats import ParseStats

def _problems(rec: Recipe) -> List[str]:
    probs: List[str] = []
    if not rec.ingredients:
        probs.append("no-ingredients")
    if not rec.instructions:
        probs.append("no-steps")
    if rec.nutrition.calories <= 0:
        probs.append("no-calories")
    if len(rec.tags) > 4:
        probs.append(f"too-many-tags({len(rec.tags)})")
    return probs

def split_responses(raw: str) -> List[str]:
    blocks: List[str] = []
    cur: List[str] = []
    for line in raw.splitlines():
        if line.strip() == "---":
            blocks.append("\n".join(cur))
            cur = []
        else:
            cur.append(line)
    blocks.append("\n".join(cur))
    return [b for b in blocks if b.strip()]

def main(path: str) -> int:
    with open(path, encoding="utf-8") as f:
        blocks = split_responses(f.read())

    stats = ParseStats()
    failed = 0
    for i, block in enumerate(blocks):
        out = decode(block, stats=stats)
        if isinstance(out, Failure):
            failed += 1
            print(f"#{i}: FAILED reason={out.reason.value} stage={out.stage.value if out.stage else '-'} | {out.detail[:80]}")
            continue
        print(f"#{i}: {out.source.value} records={len(out.records)}")
        for rec in out.records:
            probs = _problems(rec)
            if probs:
                print("  -", rec.name, "=>", probs)

    print(f"checked: {len(blocks)}, failed: {failed}")
    print("stats:", get_stats(stats))
    return 1 if failed else 0

if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("usage: python -m fitcoach.scripts.decode_report <file>")
        sys.exit(2)
    sys.exit(main(sys.argv[1]))
