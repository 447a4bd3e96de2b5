"""
학습 계획 생성기
과목 이름으로 미리 정의된 주제 목록을 찾아 일자별로 나눕니다.
"""

import math
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from studyplanner.models.study_session import Difficulty, StudySessionCreate

DEFAULT_DAYS = 7
DEFAULT_SESSION_MINUTES = 60
DEFAULT_START_HOUR = 9

FOCUS_FOUNDATION = "Foundation"
FOCUS_BUILDING = "Building Knowledge"
FOCUS_ADVANCED = "Advanced Concepts"
FOCUS_REVIEW = "Review & Practice"

CS_TOPICS: Dict[str, List[str]] = {
    "data structures": [
        "Arrays and Strings - Basic operations and common algorithms",
        "Linked Lists - Single, Double, and Circular implementations",
        "Stacks and Queues - Implementation and applications",
        "Trees - Binary Trees, BST, AVL Trees",
        "Heaps - Min Heap, Max Heap, Priority Queue",
        "Hash Tables - Hash functions and collision resolution",
        "Graphs - Representations and traversal algorithms (BFS, DFS)",
        "Advanced Trees - B-Trees, Red-Black Trees, Tries",
        "Sorting Algorithms - Quick Sort, Merge Sort, Heap Sort",
        "Searching Algorithms - Binary Search variations",
        "Dynamic Programming - Common patterns",
        "Greedy Algorithms - Problem-solving techniques",
        "Graph Algorithms - Dijkstra, Bellman-Ford, MST",
        "String Algorithms - KMP, Rabin-Karp",
    ],
    "algorithms": [
        "Algorithm Complexity - Big O notation and analysis",
        "Recursion - Base cases and recursive thinking",
        "Divide and Conquer - Merge Sort, Quick Sort",
        "Dynamic Programming Basics - Memoization vs Tabulation",
        "Greedy Algorithms - Activity Selection, Huffman Coding",
        "Backtracking - N-Queens, Sudoku Solver",
        "Graph Traversal - BFS and DFS applications",
        "Shortest Path - Dijkstra and Bellman-Ford",
        "Minimum Spanning Tree - Kruskal and Prim algorithms",
        "String Matching - KMP, Boyer-Moore",
        "Advanced DP - Knapsack, LCS, Edit Distance",
        "Network Flow - Max Flow, Min Cut",
        "NP-Complete Problems - Understanding complexity classes",
        "Approximation Algorithms - Practical solutions",
    ],
    "operating systems": [
        "OS Fundamentals - Components and architecture",
        "Process Management - States, PCB, Context Switching",
        "CPU Scheduling - FCFS, SJF, Round Robin, Priority",
        "Process Synchronization - Critical Section Problem",
        "Deadlocks - Detection, Prevention, Avoidance",
        "Memory Management - Contiguous and Paging",
        "Virtual Memory - Demand Paging, Page Replacement",
        "File Systems - Structure and Implementation",
        "I/O Systems - Device Management",
        "Threading - User vs Kernel threads",
        "Concurrency Control - Semaphores, Monitors, Mutexes",
        "Disk Management - Scheduling algorithms",
        "Security and Protection - Access control",
        "Case Studies - Linux, Windows internals",
    ],
    "database": [
        "DBMS Fundamentals - Data Models and Architecture",
        "Relational Model - Relations, Keys, Integrity",
        "SQL Basics - DDL, DML, DCL commands",
        "Advanced SQL - Joins, Subqueries, Views",
        "Normalization - 1NF, 2NF, 3NF, BCNF",
        "Transaction Management - ACID properties",
        "Concurrency Control - Locking protocols",
        "Recovery Techniques - Log-based recovery",
        "Indexing - B+ Trees, Hash Indexing",
        "Query Optimization - Query processing",
        "NoSQL Databases - Document, Key-Value stores",
        "Database Security - Access control, SQL injection",
        "Distributed Databases - CAP theorem",
        "Database Design - ER Diagrams, Schema design",
    ],
    "computer networks": [
        "Network Fundamentals - OSI and TCP/IP models",
        "Physical Layer - Transmission media, encoding",
        "Data Link Layer - Framing, Error detection",
        "MAC Protocols - ALOHA, CSMA/CD, CSMA/CA",
        "Network Layer - IPv4, IPv6, Subnetting",
        "Routing Algorithms - Distance Vector, Link State",
        "Transport Layer - TCP and UDP",
        "Flow Control - Sliding Window protocols",
        "Congestion Control - TCP congestion algorithms",
        "Application Layer - HTTP, DNS, SMTP, FTP",
        "Network Security - Cryptography basics",
        "Wireless Networks - WiFi, Mobile networks",
        "Network Management - SNMP, Performance",
        "Modern Protocols - HTTP/2, WebSockets, QUIC",
    ],
    "machine learning": [
        "ML Fundamentals - Types of learning, workflow",
        "Linear Regression - Theory and implementation",
        "Logistic Regression - Binary classification",
        "Decision Trees - Construction and pruning",
        "Random Forests - Ensemble learning",
        "Support Vector Machines - Kernel methods",
        "Neural Networks - Backpropagation",
        "Deep Learning - CNNs for image processing",
        "Recurrent Networks - RNNs, LSTMs for sequences",
        "Unsupervised Learning - K-means, Hierarchical",
        "Dimensionality Reduction - PCA, t-SNE",
        "Model Evaluation - Cross-validation, metrics",
        "Regularization - L1, L2, Dropout",
        "Advanced Topics - Transfer Learning, GANs",
    ],
    "web development": [
        "HTML Fundamentals - Semantic markup, forms",
        "CSS Basics - Selectors, Box model, Flexbox",
        "CSS Grid - Layout techniques",
        "JavaScript Fundamentals - ES6+ features",
        "DOM Manipulation - Events and handlers",
        "Async JavaScript - Promises, Async/Await",
        "React Basics - Components, Props, State",
        "React Hooks - useState, useEffect, custom hooks",
        "State Management - Context API, Redux",
        "Backend Basics - Node.js, Express",
        "RESTful APIs - Design and implementation",
        "Database Integration - SQL and NoSQL",
        "Authentication - JWT, OAuth",
        "Deployment - CI/CD, Docker basics",
    ],
    "python": [
        "Python Basics - Syntax, data types, operators",
        "Control Flow - If/else, loops, functions",
        "Data Structures - Lists, tuples, dictionaries, sets",
        "Object-Oriented Programming - Classes, inheritance",
        "File Handling - Reading/writing files",
        "Exception Handling - Try/except blocks",
        "Modules and Packages - Imports, pip",
        "List Comprehensions - Advanced syntax",
        "Lambda Functions - Functional programming",
        "Decorators - Function wrappers",
        "Generators - Yield and iterators",
        "Multithreading - Concurrent execution",
        "Regular Expressions - Pattern matching",
        "Popular Libraries - NumPy, Pandas basics",
    ],
    "java": [
        "Java Basics - Syntax, data types, operators",
        "OOP Fundamentals - Classes, objects, methods",
        "Inheritance - Extends, super, method overriding",
        "Polymorphism - Method overloading, interfaces",
        "Abstraction - Abstract classes, interfaces",
        "Encapsulation - Access modifiers, getters/setters",
        "Exception Handling - Try-catch-finally",
        "Collections Framework - List, Set, Map",
        "Generics - Type parameters",
        "Multithreading - Thread class, Runnable",
        "File I/O - Streams, readers, writers",
        "JDBC - Database connectivity",
        "Java 8 Features - Lambda, Stream API",
        "Spring Framework - Dependency Injection basics",
    ],
    "c++": [
        "C++ Basics - Syntax, data types, I/O",
        "Functions - Declaration, definition, overloading",
        "Pointers - Memory addresses, pointer arithmetic",
        "References - Pass by reference",
        "Classes and Objects - Constructors, destructors",
        "Inheritance - Single, multiple, multilevel",
        "Polymorphism - Virtual functions, abstract classes",
        "Operator Overloading - Custom operators",
        "Templates - Function and class templates",
        "STL Containers - Vector, list, map, set",
        "STL Algorithms - Sort, find, transform",
        "Exception Handling - Try-catch blocks",
        "File Handling - Streams and file operations",
        "Smart Pointers - unique_ptr, shared_ptr",
    ],
}

GENERIC_TOPIC_SUFFIXES = [
    "Introduction and fundamentals",
    "Core concepts and terminology",
    "Basic operations and techniques",
    "Intermediate topics and patterns",
    "Advanced concepts",
    "Problem-solving strategies",
    "Best practices and optimization",
    "Real-world applications",
    "Common pitfalls and debugging",
    "Testing and validation",
    "Performance considerations",
    "Integration with other technologies",
    "Case studies and examples",
    "Review and practice problems",
]


def find_topics(subject: str) -> List[str]:
    """과목에 해당하는 주제 목록 (일치하는 항목이 없으면 일반 주제)"""
    subject_lower = subject.lower()
    for key, topics in CS_TOPICS.items():
        if key in subject_lower or subject_lower in key:
            return list(topics)
    return [f"{subject} - {suffix}" for suffix in GENERIC_TOPIC_SUFFIXES]


def _focus(day: int, days: int) -> str:
    if day == 1:
        return FOCUS_FOUNDATION
    if day == days:
        return FOCUS_REVIEW
    if day <= math.ceil(days / 2):
        return FOCUS_BUILDING
    return FOCUS_ADVANCED


def generate_study_plan(subject: str, days: int = DEFAULT_DAYS) -> List[Dict]:
    """일자별 학습 계획 생성

    Returns:
        [{"day": 1, "topics": [...], "focus": "Foundation"}, ...]
        주제가 배정되지 않은 날은 포함되지 않습니다.
    """
    subject = (subject or "").strip()
    if not subject:
        raise ValueError("Subject is required")
    if days < 1:
        raise ValueError("days는 1 이상이어야 합니다.")

    topics = find_topics(subject)
    per_day = math.ceil(len(topics) / days)

    plan = []
    for day in range(1, days + 1):
        day_topics = topics[(day - 1) * per_day:day * per_day]
        if day_topics:
            plan.append({
                "day": day,
                "topics": day_topics,
                "focus": _focus(day, days),
            })
    return plan


def _difficulty_for(focus: str) -> Difficulty:
    if focus == FOCUS_FOUNDATION:
        return Difficulty.EASY
    if focus == FOCUS_ADVANCED:
        return Difficulty.HARD
    return Difficulty.MEDIUM


def plan_to_sessions(subject: str, plan: List[Dict],
                     selected: Iterable[Tuple[int, int]],
                     now: Optional[datetime] = None) -> List[StudySessionCreate]:
    """선택한 (날짜 인덱스, 주제 인덱스) 목록을 세션 생성 요청으로 변환

    각 세션은 오늘로부터 day일 뒤 오전 9시에 60분으로 잡힙니다.
    """
    now = now or datetime.now()
    selected = set(selected)

    sessions = []
    for day_index, day_plan in enumerate(plan):
        for topic_index, topic in enumerate(day_plan["topics"]):
            if (day_index, topic_index) not in selected:
                continue
            start = (now + timedelta(days=day_plan["day"])).replace(
                hour=DEFAULT_START_HOUR, minute=0, second=0, microsecond=0
            )
            sessions.append(StudySessionCreate(
                subject=subject,
                topic=topic,
                duration=DEFAULT_SESSION_MINUTES,
                start_time=start,
                difficulty=_difficulty_for(day_plan["focus"]),
                description=f"Day {day_plan['day']}: {day_plan['focus']}",
                goals=[topic],
            ))
    return sessions
