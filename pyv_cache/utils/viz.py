import plotly.express as px
import pandas as pd

def export_frequency_heatmap(lines, path: str):
    if not lines:
        with open(path, "w") as f:
            f.write("<h1>Cache Frequency Heatmap</h1><p>No data to display.</p>")
        return

    df = pd.DataFrame(lines)
    # Lines are never invalidated, so an empty way always reads frequency 0
    grid = df.pivot(index='set', columns='way', values='frequency')

    fig = px.imshow(
        grid,
        labels={"x": "Way", "y": "Set", "color": "Frequency"},
        title="Cache Line Access Frequency (LFU counters)",
        color_continuous_scale="Viridis",
        aspect="auto",
    )
    fig.update_xaxes(dtick=1)
    fig.update_yaxes(dtick=1)
    fig.update_layout(
        height=max(400, len(grid.index) * 25),
        font=dict(family="Courier New, monospace", size=12),
    )

    fig.write_html(path, include_plotlyjs="cdn", full_html=True)

def export_occupancy_ascii(lines):
    if not lines:
        return "Cache is empty."

    # Group by set
    set_lanes = {}
    for line in lines:
        set_lanes.setdefault(line['set'], []).append(line)

    ways = max(len(lane) for lane in set_lanes.values())
    chart = "Cache Occupancy (# valid, . empty)\n"
    chart += "-" * (10 + ways) + "\n"

    for set_index in sorted(set_lanes):
        lane = sorted(set_lanes[set_index], key=lambda l: l['way'])
        chart += f"{'Set ' + str(set_index):>8} |"
        chart += "".join('#' if l['valid'] else '.' for l in lane) + "\n"

    chart += "-" * (10 + ways) + "\n"
    valid = sum(1 for l in lines if l['valid'])
    chart += f"{valid}/{len(lines)} lines valid\n"

    return chart
