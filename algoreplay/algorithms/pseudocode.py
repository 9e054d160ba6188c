"""
pseudocode.py — Pseudocode Listings
====================================
One list of display lines per algorithm.  Snapshots carry a
`pseudocode_line` index into the matching list, so the side panel can
highlight the line that produced each frame.  Indices are noted on the
right; steppers refer to them by number, so keep them stable.
"""

from typing import Dict, List


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------
BUBBLE: List[str] = [
    "procedure bubbleSort(A)",                          # 0
    "    n ← length(A)",                                # 1
    "    for i from 0 to n-2:",                         # 2
    "        for j from 0 to n-i-2:",                   # 3
    "            if A[j] > A[j+1]:",                    # 4
    "                swap(A[j], A[j+1])",               # 5
]

SELECTION: List[str] = [
    "procedure selectionSort(A)",                       # 0
    "    n ← length(A)",                                # 1
    "    for i from 0 to n-1:",                         # 2
    "        min ← i",                                  # 3
    "        for j from i+1 to n-1:",                   # 4
    "            if A[j] < A[min]:",                    # 5
    "                min ← j",                          # 6
    "        swap(A[i], A[min])",                       # 7
]

INSERTION: List[str] = [
    "procedure insertionSort(A)",                       # 0
    "    for i from 1 to n-1:",                         # 1
    "        j ← i",                                    # 2
    "        while j > 0 and A[j-1] > A[j]:",           # 3
    "            swap(A[j-1], A[j])",                   # 4
    "            j ← j - 1",                            # 5
]

SHELL: List[str] = [
    "procedure shellSort(A)",                           # 0
    "    gap ← n / 2",                                  # 1
    "    while gap > 0:",                               # 2
    "        for i from gap to n-1:",                   # 3
    "            j ← i",                                # 4
    "            while j ≥ gap and A[j-gap] > A[j]:",   # 5
    "                swap(A[j-gap], A[j])",             # 6
    "                j ← j - gap",                      # 7
    "        gap ← gap / 2",                            # 8
]

MERGE: List[str] = [
    "procedure mergeSort(A, l, r)",                     # 0
    "    if l < r:",                                    # 1
    "        m ← (l + r) / 2",                          # 2
    "        mergeSort(A, l, m)",                       # 3
    "        mergeSort(A, m+1, r)",                     # 4
    "        merge(A, l, m, r)",                        # 5
    "",                                                 # 6
    "procedure merge(A, l, m, r)",                      # 7
    "    L ← A[l..m];  R ← A[m+1..r]",                  # 8
    "    while L and R are not empty:",                 # 9
    "        if L[0] ≤ R[0]: take L[0]",                # 10
    "        else: take R[0]",                          # 11
    "    take what is left of L",                       # 12
    "    take what is left of R",                       # 13
]

QUICK: List[str] = [
    "procedure quickSort(A, low, high)",                # 0
    "    if low < high:",                               # 1
    "        p ← partition(A, low, high)",              # 2
    "        quickSort(A, low, p-1)",                   # 3
    "        quickSort(A, p+1, high)",                  # 4
    "",                                                 # 5
    "procedure partition(A, low, high)",                # 6
    "    pivot ← A[high];  i ← low - 1",                # 7
    "    for j from low to high-1:",                    # 8
    "        if A[j] < pivot:",                         # 9
    "            i ← i + 1;  swap(A[i], A[j])",         # 10
    "    swap(A[i+1], A[high])",                        # 11
    "    return i + 1",                                 # 12
]

HEAP: List[str] = [
    "procedure heapSort(A)",                            # 0
    "    for i from n/2-1 down to 0: heapify(A, n, i)", # 1
    "    for end from n-1 down to 1:",                  # 2
    "        swap(A[0], A[end])",                       # 3
    "        heapify(A, end, 0)",                       # 4
    "",                                                 # 5
    "procedure heapify(A, size, i)",                    # 6
    "    largest ← i",                                  # 7
    "    if left < size and A[left] > A[largest]: largest ← left",     # 8
    "    if right < size and A[right] > A[largest]: largest ← right",  # 9
    "    if largest ≠ i:",                              # 10
    "        swap(A[i], A[largest]);  heapify(A, size, largest)",      # 11
]

COUNTING: List[str] = [
    "procedure countingSort(A)",                        # 0
    "    count ← zeros(max - min + 1)",                 # 1
    "    for i from 0 to n-1: count[A[i] - min] += 1",  # 2
    "    for k from 1 to len(count)-1: count[k] += count[k-1]",  # 3
    "    for i from n-1 down to 0:",                    # 4
    "        output[count[A[i] - min] - 1] ← A[i]",     # 5
    "        count[A[i] - min] -= 1",                   # 6
    "    A ← output",                                   # 7
]

RADIX: List[str] = [
    "procedure radixSort(A)",                           # 0
    "    for exp ← 1; max / exp > 0; exp ← exp × 10:",  # 1
    "        count ← zeros(10)",                        # 2
    "        for i from 0 to n-1: count[(A[i] / exp) mod 10] += 1",  # 3
    "        for d from 1 to 9: count[d] += count[d-1]",  # 4
    "        for i from n-1 down to 0:",                # 5
    "            output[count[digit(A[i])] - 1] ← A[i]",  # 6
    "            count[digit(A[i])] -= 1",              # 7
    "        A ← output",                               # 8
]


# ---------------------------------------------------------------------------
# Graph
# ---------------------------------------------------------------------------
BFS: List[str] = [
    "procedure BFS(G, start, target)",                  # 0
    "    queue ← [start];  visited ← {start}",          # 1
    "    while queue is not empty:",                    # 2
    "        u ← queue.dequeue()",                      # 3
    "        if u = target: break",                     # 4
    "        for v in adj(u):",                         # 5
    "            if v not in visited:",                 # 6
    "                visited.add(v);  parent[v] ← u",   # 7
    "                queue.enqueue(v)",                 # 8
    "    return path(parent, target)",                  # 9
]

DFS: List[str] = [
    "procedure DFS(G, start, target)",                  # 0
    "    stack ← [start]",                              # 1
    "    while stack is not empty:",                    # 2
    "        u ← stack.pop()",                          # 3
    "        if u in visited: continue",                # 4
    "        visited.add(u)",                           # 5
    "        if u = target: break",                     # 6
    "        for v in reversed(adj(u)):",               # 7
    "            if v not in visited: parent[v] ← u;  stack.push(v)",  # 8
    "    return path(parent, target)",                  # 9
]

DIJKSTRA: List[str] = [
    "procedure Dijkstra(G, start, target)",             # 0
    "    dist[start] ← 0;  pq ← [(0, start)]",          # 1
    "    while pq is not empty:",                       # 2
    "        (d, u) ← pq.pop_min()",                    # 3
    "        if u is settled: continue",                # 4
    "        settle(u);  if u = target: break",         # 5
    "        for (v, w) in adj(u):",                    # 6
    "            if dist[u] + w < dist[v]:",            # 7
    "                dist[v] ← dist[u] + w;  parent[v] ← u;  pq.push((dist[v], v))",  # 8
    "    return path(parent, target)",                  # 9
]

ASTAR: List[str] = [
    "procedure AStar(G, start, target, h)",             # 0
    "    g[start] ← 0;  open ← [(h(start), start)]",    # 1
    "    while open is not empty:",                     # 2
    "        (f, u) ← open.pop_min()",                  # 3
    "        if u is closed: continue",                 # 4
    "        close(u);  if u = target: break",          # 5
    "        for (v, w) in adj(u):",                    # 6
    "            if g[u] + w < g[v]:",                  # 7
    "                g[v] ← g[u] + w;  parent[v] ← u;  open.push((g[v] + h(v), v))",  # 8
    "    return path(parent, target)",                  # 9
]

PRIM: List[str] = [
    "procedure Prim(G, start)",                         # 0
    "    key[start] ← 0;  pq ← [(0, start, none)]",     # 1
    "    while pq is not empty and tree is incomplete:",  # 2
    "        (w, u, p) ← pq.pop_min()",                 # 3
    "        if u in tree: continue",                   # 4
    "        add u to tree;  if p ≠ none: T.add((p, u))",  # 5
    "        for (v, w) in adj(u):",                    # 6
    "            if v not in tree and w < key[v]:",     # 7
    "                key[v] ← w;  pq.push((w, v, u))",  # 8
    "    return T",                                     # 9
]

KRUSKAL: List[str] = [
    "procedure Kruskal(G)",                             # 0
    "    sort edges by weight",                         # 1
    "    for each vertex v: makeSet(v)",                # 2
    "    for (u, v, w) in edges:",                      # 3
    "        if |T| = n-1: break",                      # 4
    "        if find(u) ≠ find(v):",                    # 5
    "            union(u, v);  T.add((u, v))",          # 6
    "    return T",                                     # 7
]


LISTINGS: Dict[str, List[str]] = {
    "bubble":    BUBBLE,
    "selection": SELECTION,
    "insertion": INSERTION,
    "merge":     MERGE,
    "quick":     QUICK,
    "heap":      HEAP,
    "shell":     SHELL,
    "counting":  COUNTING,
    "radix":     RADIX,
    "bfs":       BFS,
    "dfs":       DFS,
    "dijkstra":  DIJKSTRA,
    "astar":     ASTAR,
    "prim":      PRIM,
    "kruskal":   KRUSKAL,
}
