from factories import make_entity, make_rel, make_variant
from storyloom.models import GraphLayoutRequest, Zone
from storyloom.services.associations import GRAPH_TIMELINE_COLORS, TYPE_COLORS
from storyloom.services.graph import assign_layers, causal_distances, compute_graph_layout


def _layout(**kwargs):
    return compute_graph_layout(GraphLayoutRequest(**kwargs))


def test_simple_chain_is_causal_and_layered():
    layout = _layout(
        entities=[make_entity("A"), make_entity("B")],
        relationships=[make_rel("r1", "A", "B", "causes")],
    )
    a, b = layout.node("A"), layout.node("B")

    assert a.zone == b.zone == Zone.CAUSAL
    assert (a.layer, b.layer) == (0, 1)
    assert layout.summary.causal_count == 2
    assert layout.summary.context_count == 0
    assert layout.summary.max_layer == 1
    # No context zone: DAG columns start at the minimum left offset, centred in the band.
    assert (a.x, a.y) == (280, 330)
    assert (b.x, b.y) == (460, 330)


def test_isolated_character_goes_to_context_grid():
    layout = _layout(entities=[make_entity("C", "character")])
    node = layout.node("C")

    assert node.zone == Zone.CONTEXT
    assert node.layer == -1
    assert (node.x, node.y) == (40, 80)
    assert layout.summary.max_layer == 0
    assert layout.context_zone_bounds.width == 80
    assert layout.context_zone_bounds.height == 120


def test_context_grid_groups_by_type():
    entities = [make_entity(f"c{i}", "character") for i in range(4)] + [make_entity("l1", "location")]
    layout = _layout(entities=entities)

    positions = {n.id: (n.x, n.y) for n in layout.nodes}
    assert positions["c0"] == (40, 80)
    assert positions["c1"] == (110, 80)
    assert positions["c2"] == (40, 145)
    assert positions["c3"] == (110, 145)
    # Next group starts below two rows plus the group gap.
    assert positions["l1"] == (40, 240)


def test_dag_columns_start_right_of_a_wide_context_zone():
    entities = [make_entity(f"c{i}", "character") for i in range(9)]
    entities += [make_entity("A"), make_entity("B")]
    layout = _layout(entities=entities, relationships=[make_rel("r1", "A", "B")])

    # Three context columns end at 40 + 2*70 + 70 = 250, plus a 60 gap.
    assert layout.node("A").x == 310
    assert layout.node("B").x == 490


def test_every_visible_entity_gets_exactly_one_zone():
    entities = [
        make_entity("A"), make_entity("B"), make_entity("C", "character"),
        make_entity("D", "theme"), make_entity("E", "location"),
    ]
    relationships = [
        make_rel("r1", "A", "B", "causes"),
        make_rel("r2", "C", "D", "explores_theme"),
        make_rel("r3", "B", "E", "happens_at"),
    ]
    layout = _layout(entities=entities, relationships=relationships)

    ids = [n.id for n in layout.nodes]
    assert sorted(ids) == ["A", "B", "C", "D", "E"]
    assert len(ids) == len(set(ids))
    zones = {n.id: n.zone for n in layout.nodes}
    assert zones == {
        "A": Zone.CAUSAL, "B": Zone.CAUSAL,
        "C": Zone.CONTEXT, "D": Zone.CONTEXT, "E": Zone.CONTEXT,
    }


def test_layers_are_monotonic_along_causal_edges():
    entities = [make_entity(x) for x in "ABCDEF"]
    relationships = [
        make_rel("r1", "A", "B"),
        make_rel("r2", "B", "C"),
        make_rel("r3", "C", "D"),
        make_rel("r4", "A", "D", "creates"),
        make_rel("r5", "E", "D", "inspires"),
        make_rel("r6", "D", "F", "makes"),
    ]
    layout = _layout(entities=entities, relationships=relationships)
    layer = {n.id: n.layer for n in layout.nodes}

    for rel in relationships:
        assert layer[rel.to_entity_id] >= layer[rel.from_entity_id] + 1
    assert layer["A"] == 0
    assert layer["E"] == 0
    assert layer["D"] == 3
    assert layer["F"] == 4
    assert layout.summary.cycle_detected is False


def test_associative_edges_do_not_layer():
    layout = _layout(
        entities=[make_entity("A"), make_entity("B")],
        relationships=[make_rel("r1", "A", "B", "involves")],
    )

    assert {n.zone for n in layout.nodes} == {Zone.CONTEXT}
    assert len(layout.links) == 1
    assert layout.links[0].is_causal is False


def test_relationship_filter_can_demote_entities_to_context():
    layout = _layout(
        entities=[make_entity("A"), make_entity("B")],
        relationships=[make_rel("r1", "A", "B", "causes")],
        relationship_types=["involves"],
    )

    assert {n.zone for n in layout.nodes} == {Zone.CONTEXT}
    assert layout.links == []
    assert layout.relationship_types == ["causes"]


def test_hidden_types_and_search_filter_nodes_and_links():
    entities = [
        make_entity("A", name="Storm"),
        make_entity("B", name="Flood"),
        make_entity("C", "character", name="Ada"),
    ]
    relationships = [make_rel("r1", "A", "B"), make_rel("r2", "C", "A", "involves")]

    hidden = _layout(entities=entities, relationships=relationships, hidden_types=["character"])
    assert [n.id for n in hidden.nodes] == ["A", "B"]
    assert [link.id for link in hidden.links] == ["r1"]

    searched = _layout(entities=entities, relationships=relationships, search="sto")
    assert [n.id for n in searched.nodes] == ["A"]
    assert searched.node("A").zone == Zone.CONTEXT
    assert searched.links == []


def test_cycle_with_root_terminates_and_freezes():
    assignment = assign_layers(
        ["A", "B", "C"],
        [("A", "B"), ("B", "C"), ("C", "B")],
    )

    assert assignment.layers == {"A": 0, "B": 1, "C": 2}
    assert assignment.frozen == ["B"]
    assert assignment.cycle_detected is True


def test_cycle_with_downstream_chain_stays_below_node_count():
    ids = [f"n{i}" for i in range(8)]
    edges = [("n0", "n1"), ("n1", "n2"), ("n2", "n1")]
    edges += [(f"n{i}", f"n{i + 1}") for i in range(2, 7)]

    assignment = assign_layers(ids, edges)

    assert assignment.layers["n0"] == 0
    assert all(0 <= layer < len(ids) for layer in assignment.layers.values())
    assert assignment.max_layer == len(ids) - 1
    assert assignment.cycle_detected is True
    assert assignment.frozen


def test_cycle_keeps_summary_max_layer_below_node_count():
    layout = _layout(
        entities=[make_entity(x) for x in "ABCD"],
        relationships=[
            make_rel("r1", "A", "B"),
            make_rel("r2", "B", "C"),
            make_rel("r3", "C", "B"),
            make_rel("r4", "C", "D"),
        ],
    )

    assert layout.summary.cycle_detected is True
    assert layout.summary.max_layer < 4
    assert max(n.layer for n in layout.nodes) < 4


def test_rootless_cycle_defaults_to_layer_zero():
    layout = _layout(
        entities=[make_entity("A"), make_entity("B")],
        relationships=[make_rel("r1", "A", "B"), make_rel("r2", "B", "A")],
    )

    assert {n.id: n.layer for n in layout.nodes} == {"A": 0, "B": 0}
    assert layout.summary.cycle_detected is True
    assert layout.summary.frozen_node_ids == []


def test_causal_distance_is_capped_at_four_hops():
    ids = list("ABCDEF")
    relationships = [make_rel(f"r{i}", a, b, "involves") for i, (a, b) in enumerate(zip(ids, ids[1:]))]
    layout = _layout(
        entities=[make_entity(x) for x in ids],
        relationships=relationships,
        selected_entity_id="A",
    )

    assert layout.causal_depths == {"A": 0, "B": 1, "C": 2, "D": 3, "E": 4}
    assert [n.id for n in layout.nodes if n.highlighted] == ["A", "B", "C", "D", "E"]
    assert [link.highlighted for link in layout.links] == [True, True, True, True, False]


def test_causal_distance_walks_edges_in_both_directions():
    depths = causal_distances("C", [make_rel("r1", "A", "B"), make_rel("r2", "B", "C")])

    assert depths == {"C": 0, "B": 1, "A": 2}


def test_no_selection_means_nothing_highlighted():
    layout = _layout(
        entities=[make_entity("A"), make_entity("B")],
        relationships=[make_rel("r1", "A", "B")],
    )

    assert layout.causal_depths is None
    assert not any(n.highlighted for n in layout.nodes)


def test_dangling_and_duplicate_relationships():
    layout = _layout(
        entities=[make_entity("A"), make_entity("B")],
        relationships=[
            make_rel("r1", "A", "B"),
            make_rel("r2", "A", "B"),
            make_rel("r3", "A", "ghost"),
        ],
        variants=[make_variant("ghost", "t-missing", variant_name="Nobody")],
    )

    assert [link.id for link in layout.links] == ["r1", "r2"]
    assert layout.node("B").layer == 1


def test_timelines_are_not_nodes_but_color_their_entities(two_timelines):
    entities = two_timelines + [make_entity("A"), make_entity("B"), make_entity("C", "character")]
    layout = _layout(
        entities=entities,
        relationships=[make_rel("r1", "A", "t2", "occurs_in")],
        variants=[make_variant("B", "t1"), make_variant("B", "t2")],
    )

    assert {n.id for n in layout.nodes} == {"A", "B", "C"}
    assert layout.node("A").timeline_ids == ["t2"]
    assert layout.node("A").timeline_colors == [GRAPH_TIMELINE_COLORS[1]]
    assert layout.node("B").timeline_ids == ["t1", "t2"]
    assert layout.node("C").timeline_ids == []
    assert layout.node("C").color == TYPE_COLORS["character"]


def test_entity_color_overrides_type_color():
    layout = _layout(entities=[make_entity("A", color="#123456")])

    assert layout.node("A").color == "#123456"


def test_focus_resolves_variants_without_moving_nodes(two_timelines):
    entities = two_timelines + [make_entity("A", name="Storm"), make_entity("B", name="Flood")]
    relationships = [make_rel("r1", "A", "B"), make_rel("r2", "B", "t1", "occurs_in")]
    variants = [make_variant("A", "t1", variant_name="Drought")]

    plain = _layout(entities=entities, relationships=relationships, variants=variants)
    focused = _layout(
        entities=entities,
        relationships=relationships,
        variants=variants,
        focused_timeline_id="t1",
    )

    assert plain.node("A").entity.name == "Storm"
    assert focused.node("A").entity.name == "Drought"
    assert focused.node("B").entity.name == "Flood"
    assert [(n.x, n.y) for n in plain.nodes] == [(n.x, n.y) for n in focused.nodes]
    assert plain.focused_entity_ids is None
    assert focused.focused_entity_ids == ["A", "B"]


def test_character_path_is_one_hop_neighbourhood():
    layout = _layout(
        entities=[make_entity("C", "character"), make_entity("A"), make_entity("B"), make_entity("D")],
        relationships=[
            make_rel("r1", "A", "C", "involves"),
            make_rel("r2", "C", "B", "observes"),
            make_rel("r3", "B", "D"),
        ],
        highlighted_character_id="C",
    )

    assert layout.character_path_ids == ["C", "A", "B"]


def test_layout_is_deterministic(two_timelines):
    request = GraphLayoutRequest(
        entities=two_timelines + [make_entity(x) for x in "ABCD"] + [make_entity("C1", "character")],
        relationships=[
            make_rel("r1", "A", "B"),
            make_rel("r2", "B", "C"),
            make_rel("r3", "A", "D", "branches_into"),
            make_rel("r4", "C1", "A", "involves"),
            make_rel("r5", "D", "t2", "occurs_in"),
        ],
        selected_entity_id="B",
    )

    first = compute_graph_layout(request).model_dump(mode="json")
    second = compute_graph_layout(request).model_dump(mode="json")
    assert first == second


def test_empty_input_gives_empty_layout():
    layout = _layout()

    assert layout.nodes == []
    assert layout.links == []
    assert layout.summary.causal_count == 0
    assert layout.summary.max_layer == 0
