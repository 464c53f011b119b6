import json, time, uuid, datetime as dt
from typing import Optional, Tuple, List, Dict, Any
from .db import get_conn

DDL = """
CREATE TABLE IF NOT EXISTS operation_log (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  ts TEXT NOT NULL,
  user TEXT NOT NULL,
  action TEXT NOT NULL,
  entity_type TEXT,
  entity_id TEXT,
  request_id TEXT,
  before_json TEXT,
  after_json TEXT,
  payload_json TEXT,
  result TEXT,
  err_msg TEXT,
  latency_ms INTEGER
);
CREATE INDEX IF NOT EXISTS idx_log_ts ON operation_log(ts);
CREATE INDEX IF NOT EXISTS idx_log_action ON operation_log(action);
"""

def ensure_log_schema():
    with get_conn() as conn:
        conn.executescript(DDL)
        conn.commit()

class LogContext:
    """One audit record per operation; call write() once the outcome is known."""

    def __init__(self, action: str, user: str = "owner"):
        self.action = action
        self.user = user
        self.request_id = str(uuid.uuid4())
        self.start = time.perf_counter()
        self.before = None
        self.after = None
        self.payload = None
        self.entity_type = None
        self.entity_id = None

    def set_entity(self, etype: str, eid):
        self.entity_type = etype
        self.entity_id = None if eid is None else str(eid)

    def set_before(self, obj): self.before = obj
    def set_after(self, obj): self.after = obj
    def set_payload(self, obj): self.payload = obj

    def to_record(self, result: str = "OK", err: Optional[str] = None) -> Dict[str, Any]:
        elapsed_ms = int((time.perf_counter() - self.start) * 1000)
        return {
            "ts": dt.datetime.now(dt.timezone.utc).isoformat(),
            "user": self.user,
            "action": self.action,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "request_id": self.request_id,
            "before_json": json.dumps(self.before, ensure_ascii=False) if self.before is not None else None,
            "after_json": json.dumps(self.after, ensure_ascii=False) if self.after is not None else None,
            "payload_json": json.dumps(self.payload, ensure_ascii=False) if self.payload is not None else None,
            "result": result,
            "err_msg": err,
            "latency_ms": elapsed_ms,
        }

    def write(self, result: str = "OK", err: Optional[str] = None):
        rec = self.to_record(result, err)
        with get_conn() as conn:
            conn.execute(
                """INSERT INTO operation_log
                (ts,user,action,entity_type,entity_id,request_id,before_json,after_json,payload_json,result,err_msg,latency_ms)
                VALUES(:ts,:user,:action,:entity_type,:entity_id,:request_id,:before_json,:after_json,:payload_json,:result,:err_msg,:latency_ms)""",
                rec
            )
            conn.commit()


# column filters: param name -> SQL predicate
_EQ_FILTERS = {
    "action": "action = :action",
    "result": "result = :result",
    "entity_type": "entity_type = :entity_type",
    "entity_id": "entity_id = :entity_id",
}


def search_operation_logs(q: str|None, action: str|None, ts_from: str|None, ts_to: str|None,
                          page: int, size: int, *, result: str|None = None,
                          entity_type: str|None = None, entity_id=None) -> Tuple[int, List[Dict[str, Any]]]:
    """Page through the audit log, newest first.

    q matches inside the payload/before/after JSON; ts_from/ts_to bound the ISO timestamp.
    entity_type + entity_id narrow to one record, e.g. ("STUDENT", 1) for a student's history.
    """
    eq = {"action": action, "result": result, "entity_type": entity_type,
          "entity_id": None if entity_id is None else str(entity_id)}
    params = {k: v for k, v in eq.items() if v}
    where = [_EQ_FILTERS[k] for k in params]
    if q:
        where.append("(payload_json LIKE :q OR before_json LIKE :q OR after_json LIKE :q)")
        params["q"] = f"%{q}%"
    if ts_from:
        where.append("ts >= :ts_from")
        params["ts_from"] = ts_from
    if ts_to:
        where.append("ts <= :ts_to")
        params["ts_to"] = ts_to
    wh = " WHERE " + " AND ".join(where) if where else ""
    sql = f"SELECT * FROM operation_log{wh} ORDER BY ts DESC, id DESC LIMIT :limit OFFSET :offset"
    count_sql = f"SELECT COUNT(1) AS cnt FROM operation_log{wh}"
    page = max(page, 1)
    with get_conn() as conn:
        total = conn.execute(count_sql, params).fetchone()["cnt"]
        rows = conn.execute(sql, {**params, "limit": size, "offset": (page-1)*size}).fetchall()
        return total, [dict(r) for r in rows]
