"""Fix suggestion generators, one per rule domain."""

from typing import List

from ..core.models import (
    CodeChange,
    CodeChangeType,
    FixCategory,
    FixSuggestion,
    ImplementationEffort,
    PerformanceBottleneck,
    PerformanceProfile,
)


def cpu_fixes(bottleneck: PerformanceBottleneck, profile: PerformanceProfile) -> List[FixSuggestion]:
    return [
        FixSuggestion(
            title="Optimize CPU-intensive algorithms",
            description="Review and optimize algorithms that are consuming excessive CPU resources",
            category=FixCategory.CODE_OPTIMIZATION,
            implementation_effort=ImplementationEffort.MEDIUM,
            expected_improvement=30,
            risks=["Code complexity may increase", "Requires thorough testing"],
            prerequisites=["Profile CPU usage at function level", "Identify hotspots"],
            code_changes=[CodeChange(
                file_path="app/processing.py",
                change_type=CodeChangeType.MODIFICATION,
                description="Replace quadratic membership checks with a set lookup",
                before_code="matches = [item for item in items if item in allowed_list]",
                after_code="allowed = set(allowed_list)\nmatches = [item for item in items if item in allowed]",
            )],
        ),
        FixSuggestion(
            title="Implement CPU result caching",
            description="Cache results of expensive CPU operations to avoid repeated calculations",
            category=FixCategory.CACHING_STRATEGY,
            implementation_effort=ImplementationEffort.LOW,
            expected_improvement=50,
            risks=["Memory usage increase", "Cache invalidation complexity"],
            prerequisites=["Identify cacheable operations", "Design cache key strategy"],
            code_changes=[CodeChange(
                file_path="app/pricing.py",
                change_type=CodeChangeType.ADDITION,
                description="Add an LRU cache for expensive calculations",
                after_code="@functools.lru_cache(maxsize=1000)\ndef compute_quote(product_id, quantity):\n    ...",
            )],
        ),
    ]


def memory_leak_fixes(bottleneck: PerformanceBottleneck, profile: PerformanceProfile) -> List[FixSuggestion]:
    return [
        FixSuggestion(
            title="Fix memory leaks",
            description="Identify and fix memory leaks by properly managing object references",
            category=FixCategory.CODE_OPTIMIZATION,
            implementation_effort=ImplementationEffort.HIGH,
            expected_improvement=80,
            risks=["May affect existing functionality", "Requires extensive testing"],
            prerequisites=["Memory profiling", "Heap snapshot analysis"],
            code_changes=[CodeChange(
                file_path="app/events.py",
                change_type=CodeChangeType.MODIFICATION,
                description="Unregister listeners so they do not keep handlers alive",
                before_code="bus.subscribe(\"order_created\", handler)",
                after_code="bus.subscribe(\"order_created\", handler)\n# on teardown:\nbus.unsubscribe(\"order_created\", handler)",
            )],
        ),
        FixSuggestion(
            title="Adjust garbage collection settings",
            description="Tune GC parameters to reduce memory pressure",
            category=FixCategory.CONFIGURATION_CHANGE,
            implementation_effort=ImplementationEffort.LOW,
            expected_improvement=25,
            risks=["May affect overall performance", "Requires monitoring"],
            prerequisites=["Understand current GC behavior", "Test in staging environment"],
        ),
    ]


def slow_query_fixes(bottleneck: PerformanceBottleneck, profile: PerformanceProfile) -> List[FixSuggestion]:
    return [
        FixSuggestion(
            title="Add database indexes",
            description="Create indexes on frequently queried columns to improve query performance",
            category=FixCategory.DATABASE_OPTIMIZATION,
            implementation_effort=ImplementationEffort.LOW,
            expected_improvement=70,
            risks=["Index maintenance overhead", "Storage space increase"],
            prerequisites=["Analyze query execution plans", "Identify missing indexes"],
            code_changes=[CodeChange(
                file_path="migrations/add_performance_indexes.sql",
                change_type=CodeChangeType.ADDITION,
                description="Add indexes for slow queries",
                after_code="CREATE INDEX idx_user_created_at ON users(created_at);",
            )],
        ),
        FixSuggestion(
            title="Optimize database queries",
            description="Rewrite inefficient queries and reduce N+1 query problems",
            category=FixCategory.CODE_OPTIMIZATION,
            implementation_effort=ImplementationEffort.MEDIUM,
            expected_improvement=60,
            risks=["Query complexity may increase", "Requires database knowledge"],
            prerequisites=["Query analysis", "Understanding of ORM behavior"],
            code_changes=[CodeChange(
                file_path="app/users.py",
                change_type=CodeChangeType.MODIFICATION,
                description="Load related rows in one query instead of one per user",
                before_code="users = session.query(User).all()\nfor user in users:\n    user.posts = session.query(Post).filter_by(user_id=user.id).all()",
                after_code="users = session.query(User).options(selectinload(User.posts)).all()",
            )],
        ),
    ]


def network_fixes(bottleneck: PerformanceBottleneck, profile: PerformanceProfile) -> List[FixSuggestion]:
    return [
        FixSuggestion(
            title="Implement network response caching",
            description="Cache network responses to reduce external API calls",
            category=FixCategory.CACHING_STRATEGY,
            implementation_effort=ImplementationEffort.MEDIUM,
            expected_improvement=60,
            risks=["Stale data issues", "Cache invalidation complexity"],
            prerequisites=["Identify cacheable responses", "Design cache TTL strategy"],
            code_changes=[CodeChange(
                file_path="app/api_client.py",
                change_type=CodeChangeType.MODIFICATION,
                description="Add HTTP response caching",
                before_code="response = await client.get(url)",
                after_code=(
                    "cached = cache.get(url)\n"
                    "if cached is not None:\n"
                    "    return cached\n"
                    "response = await client.get(url)\n"
                    "cache.set(url, response, ttl=300)"
                ),
            )],
        ),
        FixSuggestion(
            title="Optimize network timeouts",
            description="Adjust connection and request timeouts to reduce waiting time",
            category=FixCategory.CONFIGURATION_CHANGE,
            implementation_effort=ImplementationEffort.LOW,
            expected_improvement=20,
            risks=["May cause premature timeouts", "Requires testing"],
            prerequisites=["Analyze current timeout values", "Test with different settings"],
        ),
    ]


def disk_io_fixes(bottleneck: PerformanceBottleneck, profile: PerformanceProfile) -> List[FixSuggestion]:
    return [
        FixSuggestion(
            title="Upgrade storage to SSD",
            description="Replace traditional HDDs with SSDs for better I/O performance",
            category=FixCategory.INFRASTRUCTURE_SCALING,
            implementation_effort=ImplementationEffort.HIGH,
            expected_improvement=80,
            risks=["Cost increase", "Migration downtime"],
            prerequisites=["Evaluate storage requirements", "Plan migration strategy"],
        ),
        FixSuggestion(
            title="Implement asynchronous I/O",
            description="Use asynchronous I/O operations to prevent blocking",
            category=FixCategory.CODE_OPTIMIZATION,
            implementation_effort=ImplementationEffort.MEDIUM,
            expected_improvement=40,
            risks=["Code complexity increase", "Error handling complexity"],
            prerequisites=["Identify synchronous I/O operations", "Understand async patterns"],
            code_changes=[CodeChange(
                file_path="app/storage.py",
                change_type=CodeChangeType.MODIFICATION,
                description="Move blocking file reads off the event loop",
                before_code="data = open(file_path, \"rb\").read()",
                after_code="data = await asyncio.to_thread(Path(file_path).read_bytes)",
            )],
        ),
    ]


def lock_contention_fixes(bottleneck: PerformanceBottleneck, profile: PerformanceProfile) -> List[FixSuggestion]:
    return [
        FixSuggestion(
            title="Reduce lock granularity",
            description="Use finer-grained locking to reduce contention",
            category=FixCategory.ARCHITECTURAL_REFACTOR,
            implementation_effort=ImplementationEffort.HIGH,
            expected_improvement=70,
            risks=["Increased complexity", "Potential deadlocks"],
            prerequisites=["Analyze current locking strategy", "Design new locking scheme"],
            code_changes=[CodeChange(
                file_path="app/resources.py",
                change_type=CodeChangeType.REFACTORING,
                description="Replace the global lock with per-resource locks",
                before_code="async with global_lock:\n    await process_all(resources)",
                after_code="async with resource_locks[resource_id]:\n    await process(resource_id)",
            )],
        ),
        FixSuggestion(
            title="Implement lock-free algorithms",
            description="Use lock-free data structures and algorithms where possible",
            category=FixCategory.ARCHITECTURAL_REFACTOR,
            implementation_effort=ImplementationEffort.VERY_HIGH,
            expected_improvement=90,
            risks=["Very high complexity", "Difficult to debug"],
            prerequisites=["Deep understanding of concurrency", "Extensive testing"],
        ),
    ]


def gc_fixes(bottleneck: PerformanceBottleneck, profile: PerformanceProfile) -> List[FixSuggestion]:
    return [
        FixSuggestion(
            title="Tune garbage collection parameters",
            description="Optimize GC settings for your workload characteristics",
            category=FixCategory.CONFIGURATION_CHANGE,
            implementation_effort=ImplementationEffort.MEDIUM,
            expected_improvement=40,
            risks=["May affect memory usage", "Requires monitoring"],
            prerequisites=["Analyze GC logs", "Understand workload patterns"],
            code_changes=[CodeChange(
                file_path="app/__main__.py",
                change_type=CodeChangeType.ADDITION,
                description="Raise the generation 0 collection threshold",
                after_code="gc.set_threshold(50_000, 20, 20)",
            )],
        ),
        FixSuggestion(
            title="Reduce object allocation",
            description="Minimize object creation to reduce GC pressure",
            category=FixCategory.CODE_OPTIMIZATION,
            implementation_effort=ImplementationEffort.MEDIUM,
            expected_improvement=50,
            risks=["Code complexity may increase", "May affect readability"],
            prerequisites=["Profile object allocation", "Identify allocation hotspots"],
            code_changes=[CodeChange(
                file_path="app/processor.py",
                change_type=CodeChangeType.MODIFICATION,
                description="Stream results instead of building intermediate lists",
                before_code="results = [ProcessResult(item) for item in items]\nreturn sum(r.total for r in results)",
                after_code="return sum(ProcessResult(item).total for item in items)",
            )],
        ),
    ]


def regression_fixes() -> List[FixSuggestion]:
    return [
        FixSuggestion(
            title="Investigate performance regression",
            description="Analyze recent changes that may have caused performance degradation",
            category=FixCategory.CODE_OPTIMIZATION,
            implementation_effort=ImplementationEffort.MEDIUM,
            expected_improvement=30,
            risks=["May require code rollback"],
            prerequisites=["Code change analysis", "Git history review"],
        ),
    ]
