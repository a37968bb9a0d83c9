"""数据访问层.

职责:
- 负责 Query 组装与数据库读取
- 负责写操作的数据落库(add/delete/flush)
- 不做序列化、不返回 Response、不 commit
"""
